import re
import uuid
from types import SimpleNamespace
from unittest import mock

from django.test import SimpleTestCase

from slugged import (
    Candidates,
    Ref,
    SlugConfig,
    SlugResolver,
    UnresolvableInput,
    generate_slug,
    resolve_conflict,
)

FIXED_UUID = uuid.UUID("f9f3789a-daec-4156-af1d-fab81aa16ee5")
UUID_RE = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"


class SetOracle:
    """Stands in for the database: a slug is taken if it is in ``taken``."""

    def __init__(self, taken=(), owners=None):
        self.taken = set(taken)
        self.owners = owners or {}
        self.checked = []

    def exists(self, scope, slug, exclude=None):
        self.checked.append(slug)
        if slug not in self.taken:
            return False
        return self.owners.get(slug) is None or self.owners.get(slug) != exclude


class BrokenOracle:
    def exists(self, scope, slug, exclude=None):
        raise ConnectionError("database unavailable")


class ReservedWordsResolver(SlugResolver):
    reserved = {"new", "edit"}

    def attempt(self, candidates, scope, exclude=None):
        allowed = (c for c in candidates if self.config.normalize(c) not in self.reserved)
        return super().attempt(allowed, scope, exclude)


class SlugResolverTests(SimpleTestCase):
    def setUp(self):
        self.config = SlugConfig.build(candidate_source="title")
        self.entity = SimpleNamespace(name="Plaza Diner", city="Kingston")

    def generate(self, spec, oracle, exclude=None):
        return SlugResolver(self.config, oracle).generate(
            Candidates(self.entity, spec), scope=None, exclude=exclude
        )

    def test_first_free_candidate_wins(self):
        oracle = SetOracle()
        self.assertEqual(self.generate(["Peugot 206"], oracle), "peugot-206")
        self.assertEqual(oracle.checked, ["peugot-206"])

    def test_taken_candidates_are_passed_over(self):
        oracle = SetOracle(taken={"plaza-diner"})
        spec = [Ref("name"), [Ref("name"), Ref("city")]]
        self.assertEqual(self.generate(spec, oracle), "plaza-diner-kingston")
        self.assertEqual(oracle.checked, ["plaza-diner", "plaza-diner-kingston"])

    def test_exhausted_candidates_return_none(self):
        oracle = SetOracle(taken={"a", "b"})
        self.assertIsNone(self.generate(["A", "B"], oracle))

    def test_empty_candidates_skip_the_oracle(self):
        oracle = SetOracle()
        self.assertEqual(self.generate(["", "!!!", "Diner"], oracle), "diner")
        self.assertEqual(oracle.checked, ["diner"])

    def test_later_candidates_are_never_evaluated(self):
        calls = {"first": 0, "second": 0}

        def first():
            calls["first"] += 1
            return "Plaza Diner"

        def second():
            calls["second"] += 1
            return "Plaza Diner Kingston"

        self.assertEqual(self.generate([first, second], SetOracle()), "plaza-diner")
        self.assertEqual(calls, {"first": 1, "second": 0})

    def test_order_decides_between_free_candidates(self):
        self.assertEqual(self.generate(["Alpha", "Beta"], SetOracle()), "alpha")
        self.assertEqual(self.generate(["Beta", "Alpha"], SetOracle()), "beta")

    def test_own_slug_is_not_a_conflict(self):
        oracle = SetOracle(taken={"peugot-206"}, owners={"peugot-206": 7})
        self.assertEqual(self.generate(["Peugot 206"], oracle, exclude=7), "peugot-206")
        self.assertIsNone(self.generate(["Peugot 206"], oracle, exclude=8))

    def test_oracle_failure_propagates(self):
        with self.assertRaises(ConnectionError):
            self.generate(["Peugot 206"], BrokenOracle())

    def test_attempt_reports_first_normalized_candidate(self):
        resolver = SlugResolver(self.config, SetOracle(taken={"a", "b"}))
        self.assertEqual(
            resolver.attempt(Candidates(self.entity, ["", "A", "B"]), None),
            (None, "a"),
        )


class GenerateSlugTests(SimpleTestCase):
    def setUp(self):
        self.config = SlugConfig.build(candidate_source="title")
        self.entity = SimpleNamespace()

    def test_free_candidate_is_returned(self):
        slug = generate_slug(
            Candidates(self.entity, ["Peugot 206"]), None, None, self.config, SetOracle()
        )
        self.assertEqual(slug, "peugot-206")

    def test_fallback_appends_uuid_to_first_candidate(self):
        oracle = SetOracle(taken={"peugot-206", "peugot"})
        with mock.patch("slugged.resolver.uuid.uuid4", return_value=FIXED_UUID):
            slug = generate_slug(
                Candidates(self.entity, ["Peugot 206", "Peugot"]),
                None,
                None,
                self.config,
                oracle,
            )
        self.assertEqual(slug, "peugot-206-f9f3789a-daec-4156-af1d-fab81aa16ee5")

    def test_fallback_is_not_rechecked(self):
        oracle = SetOracle(taken={"peugot-206"})
        slug = generate_slug(
            Candidates(self.entity, ["Peugot 206"]), None, None, self.config, oracle
        )
        self.assertRegex(slug, rf"^peugot-206-{UUID_RE}$")
        self.assertEqual(oracle.checked, ["peugot-206"])

    def test_fallback_uses_configured_separator(self):
        config = SlugConfig.build(candidate_source="title", sequence_separator="_")
        slug = generate_slug(
            Candidates(self.entity, ["Peugot 206"]),
            None,
            None,
            config,
            SetOracle(taken={"peugot_206"}),
        )
        self.assertRegex(slug, rf"^peugot_206_{UUID_RE}$")

    def test_fallback_tokens_differ(self):
        first = resolve_conflict("peugot-206")
        second = resolve_conflict("peugot-206")
        self.assertNotEqual(first, second)
        self.assertTrue(re.match(rf"^peugot-206-{UUID_RE}$", first))

    def test_no_usable_candidate_is_unresolvable(self):
        for spec in ([], ["", "  "], ["!!!", "---"]):
            with self.subTest(spec=spec):
                with self.assertRaises(UnresolvableInput):
                    generate_slug(
                        Candidates(self.entity, spec), None, None, self.config, SetOracle()
                    )

    def test_normalizer_errors_propagate(self):
        def broken_normalize(value, separator="-"):
            raise UnicodeError("cannot normalize")

        config = SlugConfig.build(candidate_source="title", normalizer=broken_normalize)
        with self.assertRaises(UnicodeError):
            generate_slug(
                Candidates(self.entity, ["Peugot 206"]), None, None, config, SetOracle()
            )

    def test_requires_candidates_sequence(self):
        oracle = SetOracle()
        with self.assertRaises(TypeError):
            generate_slug([Ref("name")], None, None, self.config, oracle)
        self.assertEqual(oracle.checked, [])

    def test_custom_resolver_class(self):
        config = SlugConfig.build(
            candidate_source="title", resolver_class=ReservedWordsResolver
        )
        slug = generate_slug(
            Candidates(self.entity, ["New", "New Car"]), None, None, config, SetOracle()
        )
        self.assertEqual(slug, "new-car")
