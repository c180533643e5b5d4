# python
"""
Tests for the internal helpers: the Unset sentinel, coalesce() and rename().

This module verifies:
- Unset is a falsy, final, process-wide singleton that survives copy and pickle.
- coalesce() only replaces Unset and keeps every other falsy value.
- rename() works in both its call and decorator forms, and names parsing closures.
"""
import copy
import pickle
import unittest
from threading import Lock, Thread
from unittest import TestCase

from argweave import long, short
from argweave.utils import Unset, UnsetType, coalesce, rename


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        """
        UnsetType() always yields the exported Unset instance.
        """
        self.assertIs(self.unset, Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsy(self) -> None:
        self.assertFalse(bool(Unset))
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertTrue(all(instance is Unset for instance in results))

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testUnionWithTypes(self) -> None:
        self.assertIsInstance(Unset, str | UnsetType)


class CoalesceTest(TestCase):

    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testKeepsFalsyValues(self) -> None:
        for value in (None, 0, "", []):
            self.assertIs(coalesce(value, "fallback"), value)

    def testDefaultIsNone(self) -> None:
        self.assertIsNone(coalesce(Unset))


class RenameTest(TestCase):

    def testCallForm(self) -> None:
        function = rename(lambda: None, "named")
        self.assertEqual(function.__name__, "named")
        self.assertEqual(function.__qualname__, "named")

    def testDecoratorForm(self) -> None:
        @rename("other")
        def function():
            pass

        self.assertEqual(function.__name__, "other")

    def testRejectsNonCallable(self) -> None:
        with self.assertRaises(TypeError):
            rename(42, "name")

    def testRejectsNonStringName(self) -> None:
        with self.assertRaises(TypeError):
            rename(lambda: None, 42)

    def testArity(self) -> None:
        with self.assertRaises(TypeError):
            rename()

    def testParsingClosuresAreNamed(self) -> None:
        self.assertEqual(short("v").switch()._parse.__name__, "take_flag[-v]")
        self.assertEqual(long("jobs").argument("N")._parse.__name__, "parse")


if __name__ == "__main__":
    unittest.main()
