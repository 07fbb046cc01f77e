"""Service layer — publish, resolve, and render operations returning ServiceResult."""
