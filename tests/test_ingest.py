"""Tests for CSV ingestion and the bundled fallback scenes."""

import pytest

from emospine.data import SECTIONS, fallback_records, section_for
from emospine.ingest import (
    load_records,
    parse_csv,
    parse_csv_detailed,
    parse_intensity,
    parse_secondary,
    split_quote,
)

HEADER = "SCENE,ANATOMY,EMOTION_CLUSTER,INTENSITY,SECONDARY_EMOTION,SCENE_CONTEXT,QUOTES\n"


class TestParseIntensity:
    @pytest.mark.parametrize("raw,expected", [
        ("7/10", 0.7),
        ("10/10", 1.0),
        ("7", 0.7),
        (" 3 / 10 ", 0.3),
        ("0/10", 0.1),
        ("15/10", 1.0),
        ("", 0.5),
        ("high", 0.5),
        (None, 0.5),
        ("nan", 0.5),
    ])
    def test_values(self, raw, expected):
        assert parse_intensity(raw) == pytest.approx(expected)


class TestParseSecondary:
    def test_commas_and_semicolons(self):
        assert parse_secondary("Tension, Dread; Suspension") == ("Tension", "Dread", "Suspension")

    def test_drops_empties(self):
        assert parse_secondary(" ,Doom,, ") == ("Doom",)

    def test_empty(self):
        assert parse_secondary("") == ()
        assert parse_secondary(None) == ()


class TestSplitQuote:
    def test_speaker_after_last_separator(self):
        quote, speaker = split_quote('"Turn back - while you can." - Victor')
        assert quote == "Turn back - while you can."
        assert speaker == "Victor"

    def test_no_separator(self):
        assert split_quote('"Alone."') == ("Alone.", "Unknown")

    def test_empty(self):
        assert split_quote("") == ("", "Unknown")


class TestParseCsv:
    def test_fixture_rows(self, scenes_csv):
        records = parse_csv(scenes_csv.read_text())
        assert [r.ordinal for r in records] == [1, 2, 3, 4, 5]
        first = records[0]
        assert first.category == "fear"
        assert first.intensity == pytest.approx(0.7)
        assert first.secondary == ("Tension", "Dread", "Suspension")
        assert first.speaker == "Walton"
        assert first.quote.startswith("Something out there")

    def test_unquoted_comma_in_context(self, scenes_csv):
        record = parse_csv(scenes_csv.read_text())[3]
        assert record.context == "Victor excels at anatomy, lingering on cadavers with obsession"
        assert record.speaker == "Victor"
        assert record.quote.endswith("rewrite its ending.")

    def test_drops_malformed_rows(self):
        text = HEADER + (
            "x,Cervical,Fear,7/10,,ctx,\"q\" - A\n"
            "2,Cervical,Fear\n"
            "3,Cervical,Hope,5/10,,ctx,\"q\" - B\n"
        )
        result = parse_csv_detailed(text)
        assert [r.ordinal for r in result.records] == [3]
        assert result.rows_seen == 3
        assert result.rows_dropped == 2

    def test_blank_category_becomes_other(self):
        records = parse_csv(HEADER + "1,Cervical,,5/10,,ctx,q\n")
        assert records[0].category == "other"

    def test_header_only(self):
        assert parse_csv(HEADER) == []


class TestLoadRecords:
    @pytest.mark.asyncio
    async def test_loads_file(self, scenes_csv):
        records = await load_records(scenes_csv)
        assert len(records) == 5

    @pytest.mark.asyncio
    async def test_missing_file_falls_back(self, tmp_path, caplog):
        records = await load_records(tmp_path / "missing.csv")
        assert len(records) == 33
        assert "using bundled scenes" in caplog.text

    @pytest.mark.asyncio
    async def test_empty_file_falls_back(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text(HEADER)
        assert len(await load_records(path)) == 33

    @pytest.mark.asyncio
    async def test_no_path(self):
        assert len(await load_records(None)) == 33


class TestFallbackRecords:
    def test_thirty_three_scenes(self, records):
        assert [r.ordinal for r in records] == list(range(1, 34))

    def test_at_most_three_secondary(self, records):
        assert all(len(r.secondary) <= 3 for r in records)
        assert records[0].secondary == ("confusion", "tension", "danger")

    def test_intensity_already_normalized(self, records):
        assert records[2].intensity == 1.0
        assert all(0.0 <= r.intensity <= 1.0 for r in records)

    def test_title_as_quote(self):
        record = fallback_records()[32]
        assert record.quote == "Final reconciliation"
        assert record.speaker == "Narrator"


class TestSections:
    def test_cover_all_scenes(self):
        covered = [o for s in SECTIONS for o in range(s.start, s.end + 1)]
        assert covered == list(range(1, 34))

    def test_section_for(self):
        assert section_for(1).key == "A"
        assert section_for(15).label == "Climax / Lumbar"
        assert section_for(33).key == "E"
        assert section_for(40) is None
