import unittest

from modscout.services.variations import generate_search_variations


class TestSearchVariations(unittest.TestCase):
    def test_original_first_and_unique(self):
        for name in ["sodium", "fabric-api", "JustEnoughItems", "jei", "the-twilight-forest"]:
            variations = generate_search_variations(name)
            self.assertEqual(variations[0], name)
            self.assertEqual(variations.count(name), 1)
            self.assertEqual(len(variations), len(set(variations)))

    def test_hyphen_and_space_swaps(self):
        self.assertEqual(generate_search_variations("fabric-api"), ["fabric-api", "fabric api"])
        self.assertEqual(generate_search_variations("fabric api"), ["fabric api", "fabric-api"])

    def test_underscore(self):
        self.assertIn("iron chests", generate_search_variations("iron_chests"))

    def test_filler_stripping(self):
        self.assertIn("minimap", generate_search_variations("mod-minimap"))
        self.assertIn("create", generate_search_variations("create-fabric"))

    def test_filler_stripping_dropped_when_too_short(self):
        variations = generate_search_variations("mod-ae")
        self.assertNotIn("ae", variations)

    def test_camel_case_split(self):
        self.assertIn("Just Enough Items", generate_search_variations("JustEnoughItems"))

    def test_abbreviations(self):
        self.assertIn("just enough items", generate_search_variations("JEI"))
        self.assertEqual(generate_search_variations("emi"), ["emi"])

    def test_strips_whitespace_and_handles_empty(self):
        self.assertEqual(generate_search_variations("  sodium \n")[0], "sodium")
        self.assertEqual(generate_search_variations("   "), [])

    def test_deterministic(self):
        self.assertEqual(
            generate_search_variations("The_Mod-Fabric"),
            generate_search_variations("The_Mod-Fabric"),
        )


if __name__ == "__main__":
    unittest.main()
