"""PublishService — spreadsheet ranges to published JSON documents.

One run is a single pass: read both ranges, normalize, stamp, write.
Both ranges are read before anything is written, so a source failure
leaves the previously published documents untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from fleetsync.domain.envelope import build_envelope, build_settings_document, utc_now
from fleetsync.domain.normalizer import normalize_rows, normalize_settings_rows
from fleetsync.infrastructure.filesystem import write_json_atomic
from fleetsync.infrastructure.sheets import (
    ConfigurationError,
    GoogleSheetSource,
    RowSource,
    SourceReadError,
)
from fleetsync.services.base import BaseService
from fleetsync.services.result import ServiceResult

if TYPE_CHECKING:
    from fleetsync.config.settings import FleetSettings

logger = structlog.get_logger(__name__)


class PublishService(BaseService):
    """Run the catalog sync job."""

    def __init__(
        self,
        settings: FleetSettings,
        *,
        source: RowSource | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        super().__init__(settings)
        self._source = source
        self._clock = clock

    def _row_source(self) -> RowSource:
        if self._source is not None:
            return self._source
        return GoogleSheetSource.from_encoded(
            self._settings.sheet_id, self._settings.service_account_json
        )

    def publish(self, *, output_dir: Path | None = None, dry_run: bool = False) -> ServiceResult:
        """Read, normalize, and publish the catalog and settings documents.

        Args:
            output_dir: Override for the configured publish directory.
            dry_run: Build both documents and return them without writing.
        """
        op = "publish"
        warnings: list[str] = []

        try:
            source = self._row_source()
        except ConfigurationError as exc:
            logger.error("publish_config_error", error=str(exc))
            return ServiceResult.failure(op, "CONFIG_ERROR", str(exc))

        source_cfg = self._settings.source
        try:
            catalog_rows = source.read_range(source_cfg.catalog_range)
            settings_rows = source.read_range(source_cfg.settings_range)
        except SourceReadError as exc:
            logger.error("publish_source_error", error=str(exc))
            return ServiceResult.failure(
                op,
                "SOURCE_READ_ERROR",
                str(exc),
                detail={
                    "catalog_range": source_cfg.catalog_range,
                    "settings_range": source_cfg.settings_range,
                },
            )

        if not catalog_rows:
            msg = f"Catalog range {source_cfg.catalog_range} is empty; publishing an empty list"
            logger.warning("catalog_range_empty", range=source_cfg.catalog_range)
            warnings.append(msg)

        items = normalize_rows(catalog_rows)
        values = normalize_settings_rows(settings_rows)
        if catalog_rows and not items:
            warnings.append(f"Catalog range {source_cfg.catalog_range} has no usable rows")

        now = self._clock()
        envelope = build_envelope(items, now=now)
        settings_doc = build_settings_document(values, now=now)

        if output_dir is not None:
            catalog_path = output_dir / self._settings.publish.catalog_filename
            settings_path = output_dir / self._settings.publish.settings_filename
        else:
            catalog_path = self._settings.catalog_output_path
            settings_path = self._settings.settings_output_path

        data = {
            "catalog_path": str(catalog_path),
            "settings_path": str(settings_path),
            "version": envelope.version,
            "updated_at": envelope.updated_at,
            "item_count": len(envelope.cars),
            "active_count": len(envelope.active_items()),
            "settings_count": len(values),
        }

        if dry_run:
            data["dry_run"] = True
            data["catalog"] = envelope.to_document()
            data["settings"] = settings_doc.to_document()
            return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

        try:
            write_json_atomic(catalog_path, envelope.to_document())
            write_json_atomic(settings_path, settings_doc.to_document())
        except OSError as exc:
            logger.error("publish_write_error", error=str(exc))
            return ServiceResult.failure(op, "WRITE_ERROR", str(exc), warnings=warnings)

        logger.info(
            "published",
            version=envelope.version,
            items=data["item_count"],
            settings=data["settings_count"],
        )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
