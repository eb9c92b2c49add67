import json
import tempfile
import unittest
from pathlib import Path

from modscout.exporter import (
    build_export_document,
    default_export_filename,
    entries_from_outcomes,
    write_export,
)
from modscout.models import CatalogSource, ResolutionOutcome
from modscout.modlist import parse_mod_list_file
from tests.fakes import make_file, make_mod

SODIUM = make_mod("AANobbMI", "sodium", "Sodium")
JEI = make_mod("238222", "jei", "Just Enough Items", source=CatalogSource.CURSEFORGE)


class TestExporter(unittest.IsolatedAsyncioTestCase):
    def test_document_shape(self):
        file = make_file("f1", ["1.20.1"])
        document = build_export_document([(SODIUM, file), (JEI, None)], "1.20.1", "fabric")

        self.assertEqual(document["gameVersion"], "1.20.1")
        self.assertEqual(document["loader"], "fabric")
        self.assertEqual(
            document["mods"][0],
            {
                "title": "Sodium",
                "source": "modrinth",
                "slug": "sodium",
                "file": {"name": "File f1", "filename": "f1.jar", "url": file.url},
                "url": "https://modrinth.com/mod/sodium",
            },
        )
        self.assertIsNone(document["mods"][1]["file"])
        self.assertEqual(
            document["mods"][1]["url"], "https://www.curseforge.com/minecraft/mc-mods/jei"
        )

    def test_round_trip_through_parser(self):
        document = build_export_document([(SODIUM, None), (JEI, None)], "1.20.1", "forge")
        parsed = parse_mod_list_file(json.dumps(document), "modlist.json")

        self.assertEqual(parsed.mods, ("sodium", "jei"))
        self.assertEqual(parsed.game_version, "1.20.1")
        self.assertEqual(parsed.loader, "forge")

    def test_entries_only_from_found_outcomes(self):
        outcomes = [
            ResolutionOutcome.found("sodium", SODIUM),
            ResolutionOutcome.version_mismatch("jei", JEI, ["1.19.2"], "1.20.1", "no"),
            ResolutionOutcome.not_found("x", "no"),
        ]
        self.assertEqual(entries_from_outcomes(outcomes), [(SODIUM, None)])

    def test_default_filename(self):
        self.assertEqual(default_export_filename("1.20.1", "fabric"), "modlist-1.20.1-fabric.json")

    async def test_write_export(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = str(Path(tmp) / "out.json")
            document = build_export_document([(SODIUM, None)], "1.20.1", "fabric")
            await write_export(path, document)
            self.assertEqual(json.loads(Path(path).read_text(encoding="utf-8")), document)


if __name__ == "__main__":
    unittest.main()
