import unittest

from limitrofes.dataset.build import build_adjacency, build_dataset, build_index
from limitrofes.dataset.collate import locale_sorted
from limitrofes.dataset.parse import Record, parse_csv


SAMPLE = "NM_MUN,NM_LIM\nPelotas,Capão do Leão\nPelotas,Arroio Grande\nCapão do Leão,Pelotas\n"


class TestCollation(unittest.TestCase):
    def test_accented_names_sort_with_unaccented(self):
        names = ["Zé Doca", "Água Santa", "Alvorada", "Ametista do Sul"]
        self.assertEqual(locale_sorted(names), ["Água Santa", "Alvorada", "Ametista do Sul", "Zé Doca"])

    def test_accent_breaks_ties_after_base_letters(self):
        self.assertEqual(locale_sorted(["São Pedro", "Sao Pedro"]), ["Sao Pedro", "São Pedro"])

    def test_case_is_a_tertiary_difference(self):
        self.assertEqual(locale_sorted(["b", "A", "a"]), ["a", "A", "b"])

    def test_hyphen_sorts_before_apostrophe(self):
        names = ["Olho d'Água", "Olho-d'Água", "Olho dÁgua"]
        self.assertEqual(locale_sorted(names), ["Olho d'Água", "Olho dÁgua", "Olho-d'Água"])
        self.assertEqual(locale_sorted(["a'b", "a-b", "a b"]), ["a b", "a-b", "a'b"])


class TestBuildIndex(unittest.TestCase):
    def test_sample_entities(self):
        res = parse_csv(SAMPLE)
        self.assertEqual(build_index(res.records), ("Capão do Leão", "Pelotas"))

    def test_distinct_count_matches_records(self):
        records = [Record(e, "x") for e in ["B", "A", "B", "C", "A"]]
        self.assertEqual(len(build_index(records)), len({r.entity for r in records}))

    def test_blank_entities_are_excluded(self):
        records = [Record("", "Pelotas"), Record("   ", "Pelotas"), Record("Pelotas", "Arroio Grande")]
        self.assertEqual(build_index(records), ("Pelotas",))

    def test_does_not_mutate_input(self):
        records = [Record("B", "x"), Record("A", "y")]
        before = list(records)
        build_index(records)
        build_index(records)
        self.assertEqual(records, before)


class TestBuildAdjacency(unittest.TestCase):
    def test_neighbors_are_sorted(self):
        adj = build_adjacency(parse_csv(SAMPLE).records)
        self.assertEqual(adj["Pelotas"], ("Arroio Grande", "Capão do Leão"))
        self.assertEqual(adj["Capão do Leão"], ("Pelotas",))
        self.assertNotIn("Arroio Grande", adj)

    def test_blank_neighbors_are_dropped(self):
        adj = build_adjacency([Record("Pelotas", ""), Record("Rio Grande", "Pelotas")])
        self.assertNotIn("Pelotas", adj)

    def test_dataset_stats(self):
        text = SAMPLE + "\nPelotas\n"
        ds = build_dataset(parse_csv(text))
        stats = ds.stats()
        self.assertEqual(stats["records"], 4)
        self.assertEqual(stats["entities"], 2)
        self.assertEqual(stats["edges"], 3)
        self.assertEqual(stats["short_rows"], 1)

    def test_dataset_adjacency_is_read_only(self):
        ds = build_dataset(parse_csv(SAMPLE))
        with self.assertRaises(TypeError):
            ds.adjacency["Pelotas"] = ()


if __name__ == "__main__":
    unittest.main()
