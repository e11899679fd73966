"""Tests for the exporters."""

import json

import numpy as np
import openpyxl
import pandas as pd
import pytest

from paleobiodb.exporters import (
    CSVExporter,
    ExcelExporter,
    GeoJSONExporter,
    get_exporter,
)


@pytest.fixture
def occurrences_df():
    return pd.DataFrame(
        {
            "occurrence_no": [1001, 1002, 1003],
            "accepted_name": ["Canis", "Vulpes", "Borophagus"],
            "lng": [10.5, np.nan, -101.2],
            "lat": [45.2, np.nan, 36.1],
            "ref_url": ["https://paleobiodb.org/classic/displayReference?id=1", None, None],
        }
    )


class TestGetExporter:
    def test_known_formats(self):
        """Test exporter lookup by format name."""
        assert get_exporter("csv") is CSVExporter
        assert get_exporter("Excel") is ExcelExporter
        assert get_exporter("xlsx") is ExcelExporter
        assert get_exporter("geojson") is GeoJSONExporter
        assert get_exporter("json") is GeoJSONExporter

    def test_unknown_format(self):
        """Test an unknown format is rejected."""
        with pytest.raises(ValueError, match="Unsupported format"):
            get_exporter("parquet")


class TestCSVExporter:
    def test_export(self, tmp_path, occurrences_df):
        """Test CSV export."""
        path = CSVExporter().export(occurrences_df, tmp_path / "occs.csv")

        df = pd.read_csv(path)
        assert df["accepted_name"].tolist() == ["Canis", "Vulpes", "Borophagus"]
        assert df["occurrence_no"].tolist() == [1001, 1002, 1003]

    def test_suffix_enforced(self, tmp_path, occurrences_df):
        """Test the .csv suffix is enforced."""
        path = CSVExporter().export(occurrences_df, tmp_path / "occs.txt")
        assert path.suffix == ".csv"
        assert path.exists()

    def test_empty_table_keeps_header(self, tmp_path):
        """Test an empty table keeps its header."""
        path = CSVExporter().export(pd.DataFrame(columns=["oid", "tna"]), tmp_path / "e.csv")
        assert path.read_text().strip() == "oid,tna"


class TestExcelExporter:
    def test_styled_export(self, tmp_path, occurrences_df):
        """Test styled Excel export."""
        path = ExcelExporter().export(occurrences_df, tmp_path / "occs")

        assert path.suffix == ".xlsx"
        ws = openpyxl.load_workbook(path).active

        assert ws.title == "PBDB Data"
        assert [cell.value for cell in ws[1]] == list(occurrences_df.columns)
        assert ws.freeze_panes == "A2"
        assert ws["B2"].value == "Canis"
        assert ws["E2"].hyperlink is not None

    def test_missing_coordinates_highlighted(self, tmp_path, occurrences_df):
        """Test rows without coordinates are highlighted."""
        path = ExcelExporter().export(occurrences_df, tmp_path / "occs.xlsx")
        ws = openpyxl.load_workbook(path).active

        # Row 3 holds Vulpes, which has no coordinates
        assert ws["A3"].fill.start_color.rgb.endswith("FFF2CC")
        assert ws["C3"].value is None
        assert not ws["A2"].fill.start_color.rgb.endswith("FFF2CC")

    def test_plain_export(self, tmp_path, occurrences_df):
        """Test plain Excel export."""
        path = ExcelExporter().export(occurrences_df, tmp_path / "occs.xlsx", styled=False)

        df = pd.read_excel(path)
        assert df["accepted_name"].tolist() == ["Canis", "Vulpes", "Borophagus"]

    @pytest.mark.parametrize("styled", [True, False])
    def test_control_characters_stripped(self, tmp_path, occurrences_df, styled):
        """Control characters in free text do not break the workbook."""
        occurrences_df.loc[0, "accepted_name"] = "Ca\x01nis"

        path = ExcelExporter().export(occurrences_df, tmp_path / "occs.xlsx", styled=styled)

        ws = openpyxl.load_workbook(path).active
        assert ws["B2"].value == "Canis"


class TestGeoJSONExporter:
    def test_export(self, tmp_path, occurrences_df):
        """Test GeoJSON export."""
        path = GeoJSONExporter().export(occurrences_df, tmp_path / "occs.geojson")

        data = json.loads(path.read_text())
        assert data["type"] == "FeatureCollection"
        assert len(data["features"]) == 2

        feature = data["features"][0]
        assert feature["id"] == "1001"
        assert feature["geometry"]["coordinates"] == [10.5, 45.2]
        assert feature["properties"]["accepted_name"] == "Canis"
        assert "lng" not in feature["properties"]

    def test_minimal_properties(self, occurrences_df):
        """Test features with only identifying properties."""
        collection = GeoJSONExporter(include_all_properties=False).to_feature_collection(
            occurrences_df
        )
        assert collection["features"][0]["properties"] == {"accepted_name": "Canis"}

    def test_no_coordinate_columns(self, tmp_path):
        """Test a table without coordinates is rejected."""
        df = pd.DataFrame({"taxon_no": [1], "taxon_name": ["Canis"]})

        with pytest.raises(ValueError, match="show=coords"):
            GeoJSONExporter().export(df, tmp_path / "taxa.geojson")

    def test_suffix_enforced(self, tmp_path, occurrences_df):
        """Test the .geojson suffix is enforced."""
        path = GeoJSONExporter().export(occurrences_df, tmp_path / "occs.txt")
        assert path.suffix == ".geojson"
