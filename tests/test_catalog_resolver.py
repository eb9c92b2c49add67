import unittest

import aiohttp

from modscout.models import (
    CatalogSource,
    ReleaseChannel,
    ResolutionStatus,
    ResolveContext,
)
from modscout.services.catalog_resolver import CatalogResolver, select_search_match
from tests.fakes import FakeAdapter, make_file, make_mod

SODIUM = make_mod("AANobbMI", "sodium", "Sodium")


class TestSelectSearchMatch(unittest.TestCase):
    def test_exact_title_match(self):
        mods = [make_mod("1", "sodium-extra"), make_mod("2", "sodium-mod", "Sodium")]
        self.assertEqual(select_search_match(mods, "sodium", "sodium").id, "2")

    def test_variation_slug_match(self):
        mods = [make_mod("1", "api-lib"), make_mod("2", "fabric-api", "Fabric API")]
        self.assertEqual(select_search_match(mods, "fabric_api", "fabric api").id, "2")

    def test_top_hit_fallback(self):
        mods = [make_mod("1", "a"), make_mod("2", "b")]
        self.assertEqual(select_search_match(mods, "zzz", "zzz").id, "1")


class TestCatalogResolver(unittest.IsolatedAsyncioTestCase):
    async def test_direct_lookup_skips_search(self):
        adapter = FakeAdapter(
            direct={"sodium": SODIUM},
            files={SODIUM.id: [make_file("f1", ["1.20.1"])]},
        )
        outcome = await CatalogResolver(adapter).resolve(
            "sodium", ResolveContext("1.20.1", "fabric")
        )
        self.assertEqual(outcome.status, ResolutionStatus.FOUND)
        self.assertEqual(outcome.file.id, "f1")
        self.assertEqual(outcome.target_version, "1.20.1")
        self.assertNotIn("search", adapter.call_names())

    async def test_not_found_returns_none(self):
        adapter = FakeAdapter()
        self.assertIsNone(
            await CatalogResolver(adapter).resolve("nothing", ResolveContext("1.20.1"))
        )

    async def test_failed_variation_does_not_abort(self):
        adapter = FakeAdapter(
            search_results={"fabric api": [make_mod("P7dR8mSH", "fabric-api")]},
            search_errors=["fabric-api"],
        )
        outcome = await CatalogResolver(adapter).resolve(
            "fabric-api", ResolveContext(auto_pick=False)
        )
        self.assertEqual(outcome.mod.id, "P7dR8mSH")
        self.assertIsNone(outcome.file)

    async def test_lookup_transport_error_counts_as_miss(self):
        adapter = FakeAdapter(
            lookup_error=aiohttp.ClientConnectionError("reset"),
            search_results={"sodium": [SODIUM]},
        )
        outcome = await CatalogResolver(adapter).resolve(
            "sodium", ResolveContext(auto_pick=False)
        )
        self.assertEqual(outcome.mod, SODIUM)

    async def test_primary_style_search_keeps_filters(self):
        adapter = FakeAdapter(search_results={("sodium", "", ""): [SODIUM]})
        outcome = await CatalogResolver(adapter).resolve(
            "sodium", ResolveContext("1.20.1", "fabric", auto_pick=False)
        )
        self.assertIsNone(outcome)
        searches = [c for c in adapter.calls if c[0] == "search"]
        self.assertTrue(all(c[2] == "1.20.1" and c[3] == "fabric" for c in searches))

    async def test_relaxed_search_retries_without_filters(self):
        mod = make_mod("238222", "jei", source=CatalogSource.CURSEFORGE)
        adapter = FakeAdapter(
            source=CatalogSource.CURSEFORGE,
            search_results={("jei", "", ""): [mod]},
            relax_search_filters=True,
        )
        outcome = await CatalogResolver(adapter).resolve(
            "jei", ResolveContext("1.20.1", "forge", auto_pick=False)
        )
        self.assertEqual(outcome.mod, mod)
        searches = [c for c in adapter.calls if c[0] == "search"]
        self.assertEqual(searches, [("search", "jei", "1.20.1", "forge"), ("search", "jei", "", "")])

    async def test_loader_fallback(self):
        adapter = FakeAdapter(
            direct={"sodium": SODIUM},
            files={SODIUM.id: [make_file("forge-build", ["1.20.1"], loaders=["forge"])]},
        )
        outcome = await CatalogResolver(adapter).resolve(
            "sodium", ResolveContext("1.20.1", "fabric")
        )
        self.assertEqual(outcome.file.id, "forge-build")
        self.assertIn(("list_files", SODIUM.id, "1.20.1", ""), adapter.calls)

    async def test_version_mismatch_lists_sorted_versions(self):
        adapter = FakeAdapter(
            direct={"sodium": SODIUM},
            files={
                SODIUM.id: [
                    make_file("old", ["1.20"]),
                    make_file("new", ["1.20.1"]),
                ]
            },
        )
        outcome = await CatalogResolver(adapter).resolve(
            "sodium", ResolveContext("1.20.5", "fabric")
        )
        self.assertEqual(outcome.status, ResolutionStatus.VERSION_MISMATCH)
        self.assertEqual(outcome.available_versions, ("1.20.1", "1.20"))
        self.assertEqual(outcome.mod, SODIUM)
        self.assertIsNone(outcome.file)
        self.assertIn("Modrinth", outcome.message)

    async def test_mod_without_any_files(self):
        adapter = FakeAdapter(direct={"sodium": SODIUM})
        outcome = await CatalogResolver(adapter).resolve(
            "sodium", ResolveContext("1.20.1", "fabric")
        )
        self.assertEqual(outcome.status, ResolutionStatus.FOUND)
        self.assertIsNone(outcome.file)
        self.assertTrue(outcome.message)

    async def test_validation_failure_degrades_to_mod_only(self):
        adapter = FakeAdapter(
            direct={"sodium": SODIUM},
            files_error=aiohttp.ClientConnectionError("reset"),
        )
        outcome = await CatalogResolver(adapter).resolve(
            "sodium", ResolveContext("1.20.1", "fabric")
        )
        self.assertEqual(outcome.status, ResolutionStatus.FOUND)
        self.assertEqual(outcome.mod, SODIUM)
        self.assertIsNone(outcome.file)

    async def test_auto_pick_disabled_skips_files(self):
        adapter = FakeAdapter(direct={"sodium": SODIUM})
        outcome = await CatalogResolver(adapter).resolve(
            "sodium", ResolveContext("1.20.1", "fabric", auto_pick=False)
        )
        self.assertEqual(outcome.status, ResolutionStatus.FOUND)
        self.assertNotIn("list_files", adapter.call_names())

    async def test_latest_pick_without_version(self):
        adapter = FakeAdapter(
            direct={"sodium": SODIUM},
            files={
                SODIUM.id: [
                    make_file("beta", ["1.21"], release_type=ReleaseChannel.BETA),
                    make_file("stable", ["1.20.1"]),
                    make_file("forge", ["1.21"], loaders=["forge"]),
                ]
            },
        )
        outcome = await CatalogResolver(adapter).resolve("sodium", ResolveContext("", "fabric"))
        self.assertEqual(outcome.file.id, "stable")
        self.assertEqual(adapter.calls[-1], ("list_files", SODIUM.id, "", "fabric"))

    async def test_blank_query_makes_no_requests(self):
        adapter = FakeAdapter(direct={"": SODIUM})
        self.assertIsNone(await CatalogResolver(adapter).resolve("   ", ResolveContext()))
        self.assertEqual(adapter.calls, [])


if __name__ == "__main__":
    unittest.main()
