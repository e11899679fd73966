"""
GeoJSON exporter for PBDB result tables.

Exports rows with coordinates as a GeoJSON FeatureCollection, suitable for:
- QGIS
- ArcGIS
- Leaflet/Mapbox web maps
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import geojson
import pandas as pd
from geojson import Feature, FeatureCollection, Point

from paleobiodb.utils import find_coordinate_columns, get_logger

# Record identifier columns (pbdb vocabulary first, then compact vocabulary)
ID_COLUMNS = ("occurrence_no", "collection_no", "oid", "cid")


class GeoJSONExporter:
    """
    Export a result table to GeoJSON format.

    Creates a FeatureCollection with a Point geometry per row.
    Rows without coordinates are skipped.

    Example:
        exporter = GeoJSONExporter()
        exporter.export(df, "output.geojson")
    """

    def __init__(self, include_all_properties: bool = True):
        """
        Initialize the exporter.

        Args:
            include_all_properties: Include every column in properties
        """
        self.include_all_properties = include_all_properties
        self.logger = get_logger()

    def export(
        self,
        df: pd.DataFrame,
        output_path: str | Path,
        **kwargs,  # Accept extra args for compatibility
    ) -> Path:
        """
        Export a table to a GeoJSON file.

        Args:
            df: Result table with longitude/latitude columns
            output_path: Output file path

        Returns:
            Path to the created file

        Raises:
            ValueError: If the table has no coordinate columns
        """
        output_path = Path(output_path)

        if output_path.suffix.lower() not in (".geojson", ".json"):
            output_path = output_path.with_suffix(".geojson")

        self.logger.info(f"Exporting {len(df):,} rows to GeoJSON...")

        feature_collection = self.to_feature_collection(df)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(geojson.dumps(feature_collection, indent=2))

        self.logger.info(f"GeoJSON file saved: {output_path}")
        return output_path

    def to_feature_collection(self, df: pd.DataFrame) -> FeatureCollection:
        """
        Build a FeatureCollection from a result table.

        Raises:
            ValueError: If the table has no coordinate columns
        """
        coords = find_coordinate_columns(df.columns)
        if coords is None:
            raise ValueError(
                "Table has no coordinate columns; request them with show=coords"
            )
        lng_col, lat_col = coords
        id_col = next((name for name in ID_COLUMNS if name in df.columns), None)

        records = df.astype(object).where(df.notna(), None).to_dict(orient="records")

        features = []
        skipped = 0

        for record in records:
            lng = record.get(lng_col)
            lat = record.get(lat_col)
            if lng is None or lat is None:
                skipped += 1
                continue

            feature = Feature(
                geometry=Point((float(lng), float(lat))),
                properties=self._get_properties(record, coords),
                id=str(record[id_col]) if id_col and record[id_col] is not None else None,
            )
            features.append(feature)

        if skipped > 0:
            self.logger.warning(f"Skipped {skipped} rows without coordinates")

        return FeatureCollection(features)

    def _get_properties(
        self, record: dict[str, Any], coords: tuple[str, str]
    ) -> dict[str, Any]:
        # Coordinates live in the geometry
        props = {key: value for key, value in record.items() if key not in coords}

        if self.include_all_properties:
            return props

        wanted = ("accepted_name", "identified_name", "tna", "early_interval", "oei")
        return {key: props[key] for key in wanted if key in props}
