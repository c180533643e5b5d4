# python
"""
Combinator core tests (Parser and its operators).

Scope
- Sequencing (zip, construct): order independence of named options, fault propagation.
- Alternation (or_else, |): strict left bias, merged MissingError, MessageError and
  EarlyExit never masked.
- Repetition (many, some): zero matches, stop on no progress, MessageError propagation.
- Absence handling (optional, fallback, fallback_with) and value transforms
  (map, parse, guard, pure).
- Grammar metadata built by each operator.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from collections import namedtuple
from unittest import TestCase

from argweave import (
    Args,
    EarlyExit,
    FaultCode,
    MessageError,
    MissingError,
    Parser,
    construct,
    long,
    positional,
    short,
)
from argweave.meta import Alternatives, Sequence


def run(parser, *argv):
    return parser(Args.from_argv(argv))


def words(args):
    return [str(item) for item in args]


class TestZip(TestCase):

    def testOrderIndependence(self):
        parser = short("a").switch().zip(short("b").switch())
        for argv in (["-a", "-b"], ["-b", "-a"]):
            value, remaining = run(parser, *argv)
            self.assertEqual(value, (True, True))
            self.assertFalse(remaining)

    def testThreadsStateLeftToRight(self):
        parser = positional("FIRST").zip(positional("SECOND"))
        value, _ = run(parser, "a", "b")
        self.assertEqual(value, ("a", "b"))

    def testFailurePropagates(self):
        parser = short("a").req_flag(1).zip(short("b").req_flag(2))
        with self.assertRaises(MissingError) as context:
            run(parser, "-a")
        self.assertEqual(context.exception.metas[0].item.name, "-b")

    def testMetaIsSequence(self):
        parser = short("a").switch().zip(short("b").switch(), short("c").switch())
        self.assertIsInstance(parser.meta, Sequence)
        self.assertEqual(len(parser.meta.metas), 3)

    def testRejectsNonParsers(self):
        with self.assertRaises(TypeError):
            short("a").switch().zip(42)


class TestConstruct(TestCase):

    def testBuildsRecord(self):
        Options = namedtuple("Options", "verbose file")
        parser = construct(Options, short("v").switch(), positional("FILE"))
        value, _ = run(parser, "file", "-v")
        self.assertEqual(value, Options(True, "file"))

    def testRequiresParsers(self):
        with self.assertRaises(TypeError):
            construct(tuple)
        with self.assertRaises(TypeError):
            construct(tuple, "x")


class TestOrElse(TestCase):

    def testFirstSuccessWins(self):
        left = short("a").req_flag("left")
        right = short("a").req_flag("a").zip(short("b").req_flag("b")).map(lambda _: "right")
        value, remaining = run(left | right, "-a", "-b")
        # the right branch would have consumed more, the left one still wins
        self.assertEqual(value, "left")
        self.assertEqual(words(remaining), ["-b"])

    def testSecondBranchOnMissing(self):
        parser = long("a").req_flag(1) | long("b").req_flag(2)
        value, _ = run(parser, "--b")
        self.assertEqual(value, 2)

    def testBothMissingAreMerged(self):
        parser = long("a").req_flag(1) | long("b").req_flag(2)
        with self.assertRaises(MissingError) as context:
            run(parser)
        self.assertEqual(len(context.exception.metas), 2)
        self.assertEqual(context.exception.message, "expected one of --a, --b")

    def testMessageIsNeverMasked(self):
        parser = short("n").argument("N") | Parser.pure("fallback")
        with self.assertRaises(MessageError):
            run(parser, "-n")

    def testEarlyExitIsNeverMasked(self):
        tried = []

        def leave(args):
            raise EarlyExit("bye\n")

        def record(args):
            tried.append(args)
            return None, args

        parser = Parser(leave, Sequence()) | Parser(record, Sequence())
        with self.assertRaises(EarlyExit):
            run(parser)
        self.assertEqual(tried, [])

    def testRightBranchSeesOriginalState(self):
        left = short("a").req_flag(1).zip(short("b").req_flag(2))
        right = short("a").req_flag("only a")
        value, remaining = run(left | right, "-a")
        self.assertEqual(value, "only a")
        self.assertFalse(remaining)

    def testMetaIsAlternatives(self):
        parser = long("a").switch() | long("b").switch()
        self.assertIsInstance(parser.meta, Alternatives)

    def testOrWithNonParser(self):
        with self.assertRaises(TypeError):
            long("a").switch() | 42


class TestMany(TestCase):

    def testZeroMatches(self):
        value, remaining = run(short("v").req_flag(()).many())
        self.assertEqual(value, [])
        self.assertFalse(remaining)

    def testCountsRepetitions(self):
        verbosity = short("v").long("verbose").req_flag(()).many().map(len)
        value, _ = run(verbosity, "-v", "--verbose", "-v")
        self.assertEqual(value, 3)

    def testNoProgressStops(self):
        value, _ = run(short("v").switch().many())
        self.assertEqual(value, [])
        value, _ = run(short("v").switch().many(), "-v")
        self.assertEqual(value, [True])

    def testCollectsInOrder(self):
        value, remaining = run(positional("FILE").many(), "a", "-x", "b")
        self.assertEqual(value, ["a", "b"])
        self.assertEqual(words(remaining), ["-x"])

    def testMessagePropagates(self):
        with self.assertRaises(MessageError):
            run(short("n").argument("N").many(), "-n", "1", "-n")

    def testMetaIsOptional(self):
        self.assertFalse(short("v").req_flag(()).many().meta.required)


class TestSome(TestCase):

    def testAtLeastOne(self):
        value, _ = run(positional("FILE").some("need a file"), "a", "b")
        self.assertEqual(value, ["a", "b"])

    def testZeroIsMessage(self):
        with self.assertRaises(MessageError) as context:
            run(positional("FILE").some("need a file"))
        self.assertEqual(context.exception.message, "need a file")

    def testMetaStaysRequired(self):
        self.assertTrue(positional("FILE").some("need a file").meta.required)


class TestAbsence(TestCase):

    def testOptional(self):
        parser = positional("FILE").optional()
        self.assertEqual(run(parser)[0], None)
        self.assertEqual(run(parser, "a")[0], "a")

    def testFallback(self):
        jobs = long("jobs").argument("N").parse(int).fallback(1)
        self.assertEqual(run(jobs)[0], 1)
        self.assertEqual(run(jobs, "--jobs=4")[0], 4)

    def testFallbackKeepsMessage(self):
        jobs = long("jobs").argument("N").parse(int).fallback(1)
        with self.assertRaises(MessageError):
            run(jobs, "--jobs=x")

    def testFallbackWithIsLazy(self):
        calls = []

        def default():
            calls.append(None)
            return 8

        jobs = long("jobs").argument("N").parse(int).fallback_with(default)
        self.assertEqual(run(jobs, "--jobs", "2")[0], 2)
        self.assertEqual(calls, [])
        self.assertEqual(run(jobs)[0], 8)
        self.assertEqual(len(calls), 1)

    def testFallbackWithFailureIsMessage(self):
        def default():
            raise LookupError("no default configured")

        parser = long("jobs").argument("N").fallback_with(default)
        with self.assertRaises(MessageError) as context:
            run(parser)
        self.assertEqual(context.exception.message, "no default configured")

    def testFallbackMetaIsOptional(self):
        leaf = long("jobs").argument("N")
        parser = leaf.fallback("1")
        self.assertFalse(parser.meta.required)
        self.assertTrue(leaf.meta.required)
        self.assertEqual(parser.meta.usage(), "[--jobs N]")

    def testStateUntouchedOnFailure(self):
        args = Args.from_argv(["x"])
        with self.assertRaises(MissingError):
            long("flag").req_flag(1)(args)
        self.assertEqual(words(args), ["x"])


class TestTransforms(TestCase):

    def testMap(self):
        value, _ = run(positional("NAME").map(str.upper), "name")
        self.assertEqual(value, "NAME")

    def testParseFailureIsMessage(self):
        with self.assertRaises(MessageError) as context:
            run(short("n").argument("N").parse(int), "-n", "x")
        self.assertEqual(context.exception.code, FaultCode.INVALID_VALUE)
        self.assertIsInstance(context.exception.options["exception"], ValueError)

    def testParseFailureIsNotAbsence(self):
        parser = short("n").argument("N").parse(int) | Parser.pure(0)
        with self.assertRaises(MessageError):
            run(parser, "-n", "x")

    def testGuard(self):
        parser = short("n").argument("N").parse(int).guard(lambda n: n > 0, "N must be positive")
        self.assertEqual(run(parser, "-n", "3")[0], 3)
        with self.assertRaises(MessageError) as context:
            run(parser, "-n", "0")
        self.assertEqual(context.exception.message, "N must be positive")

    def testGuardCheckFailureIsMessage(self):
        parser = positional("N").guard(lambda value: int(value) > 0, "N must be positive")
        with self.assertRaises(MessageError) as context:
            run(parser, "abc")
        self.assertEqual(context.exception.code, FaultCode.INVALID_VALUE)
        self.assertIsInstance(context.exception.options["exception"], ValueError)

    def testGuardCheckFailureIsNotAbsence(self):
        parser = positional("N").guard(lambda value: int(value) > 0, "N must be positive") | Parser.pure("0")
        with self.assertRaises(MessageError):
            run(parser, "abc")

    def testPure(self):
        value, remaining = run(Parser.pure(42), "x")
        self.assertEqual(value, 42)
        self.assertEqual(words(remaining), ["x"])

    def testReusable(self):
        parser = short("v").switch()
        self.assertEqual(run(parser, "-v")[0], True)
        self.assertEqual(run(parser, "-v")[0], True)
        self.assertEqual(run(parser)[0], False)

    def testConstructorChecks(self):
        with self.assertRaises(TypeError):
            Parser(42, Sequence())
        with self.assertRaises(TypeError):
            Parser(lambda args: (None, args), "meta")


if __name__ == "__main__":
    unittest.main()
