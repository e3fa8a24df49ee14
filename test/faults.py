"""
Faults module behavioral tests (policies, codes, trigger contract).

Scope
- ErrorHandling members and their flag-style aliases.
- FaultCode normalization through a host __codes__ mapping.
- UsageError defaults, read-only options and __replace__.
- trigger(): continue / exit / panic surfacing.

Conventions
- Test method names follow CamelCase per project convention.
"""
import sys
import unittest
from unittest import TestCase, mock

from subcmd.faults import *


class ErrorHandlingTest(TestCase):

    def testAliasesAreTheSameMembers(self) -> None:
        self.assertIs(ErrorHandling.ContinueOnError, ErrorHandling.CONTINUE_ON_ERROR)
        self.assertIs(ErrorHandling.ExitOnNonZero, ErrorHandling.EXIT_ON_ERROR)
        self.assertIs(ErrorHandling.PanicOnInvalid, ErrorHandling.PANIC_ON_ERROR)

    def testThreeDistinctPolicies(self) -> None:
        self.assertEqual(len(ErrorHandling), 3)


class FaultCodeTest(TestCase):

    def testNormalizeDefaultsToNumericValue(self) -> None:
        self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "11101")

    def testNormalizeHonorsHostMapping(self) -> None:
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__codes__", {FaultCode.NO_COMMAND: "E-NOCMD"}, create=True):
            self.assertEqual(FaultCode.NO_COMMAND.normalize(), "E-NOCMD")
            self.assertEqual(FaultCode.HELP_REQUESTED.normalize(), "11201")


class UsageErrorTest(TestCase):

    def testDefaultMessagesComeFromTheClass(self) -> None:
        self.assertEqual(NoCommandError().message, "no sub-command provided")
        self.assertEqual(HelpRequested().message, "help requested")
        self.assertEqual(UnknownCommandError().message, "no such command")

    def testStatusesAndCodes(self) -> None:
        self.assertEqual(NoCommandError.status, 1)
        self.assertEqual(UnknownCommandError.status, 1)
        self.assertEqual(HelpRequested.status, 0)
        self.assertIs(NoCommandError.code, FaultCode.NO_COMMAND)
        self.assertIs(HelpRequested.code, FaultCode.HELP_REQUESTED)
        self.assertIs(UnknownCommandError.code, FaultCode.UNKNOWN_COMMAND)
        self.assertIs(UnknownSubcommandError.code, FaultCode.UNKNOWN_SUBCOMMAND)

    def testHierarchy(self) -> None:
        self.assertTrue(issubclass(UnknownSubcommandError, UnknownCommandError))
        for cls in (NoCommandError, HelpRequested, UnknownCommandError):
            with self.subTest(cls=cls):
                self.assertTrue(issubclass(cls, UsageError))
        self.assertTrue(issubclass(MalformedCommandError, TypeError))
        self.assertTrue(issubclass(ReservedNameError, ValueError))

    def testStrAndOptions(self) -> None:
        fault = UnknownCommandError("no such command 'qux'", token="qux", path="prog")
        self.assertEqual(str(fault), "no such command 'qux'")
        self.assertEqual(fault.token, "qux")
        self.assertEqual(fault.path, "prog")
        self.assertEqual(fault.suggestions, ())
        with self.assertRaises(TypeError):
            fault.options["token"] = "other"

    def testReplaceMergesOptions(self) -> None:
        fault = NoCommandError("nothing", path="prog")
        replaced = fault.__replace__(path="prog foo", extra=1)
        self.assertIsInstance(replaced, NoCommandError)
        self.assertEqual(replaced.message, "nothing")
        self.assertEqual(replaced.path, "prog foo")
        self.assertEqual(replaced.options["extra"], 1)
        self.assertEqual(fault.path, "prog")


class TriggerTest(TestCase):
    """trigger() surfaces usage faults according to the error-handling policy."""

    def testRejectsNonTriggerable(self) -> None:
        with self.assertRaises(TypeError):
            trigger(object())

    def testContinueReturnsTheFault(self) -> None:
        usage = mock.Mock()
        fault = trigger(NoCommandError(), errorhandling=ErrorHandling.CONTINUE_ON_ERROR, usage=usage)
        self.assertIsInstance(fault, NoCommandError)
        self.assertIs(fault.options["errorhandling"], ErrorHandling.CONTINUE_ON_ERROR)
        usage.assert_not_called()

    def testExitRendersUsageThenExits(self) -> None:
        usage = mock.Mock()
        with self.assertRaises(SystemExit) as context:
            trigger(UnknownCommandError(), errorhandling=ErrorHandling.EXIT_ON_ERROR, usage=usage)
        self.assertEqual(context.exception.code, 1)
        usage.assert_called_once_with()

    def testExitWithZeroForHelp(self) -> None:
        usage = mock.Mock()
        with self.assertRaises(SystemExit) as context:
            trigger(HelpRequested(), errorhandling=ErrorHandling.EXIT_ON_ERROR, usage=usage)
        self.assertEqual(context.exception.code, 0)
        usage.assert_called_once_with()

    def testPanicRaisesChainedCommandPanic(self) -> None:
        with self.assertRaises(CommandPanic) as context:
            trigger(HelpRequested(), errorhandling=ErrorHandling.PANIC_ON_ERROR)
        self.assertIsInstance(context.exception.error, HelpRequested)
        self.assertIs(context.exception.__cause__, context.exception.error)
        self.assertEqual(str(context.exception), "help requested")


if __name__ == '__main__':
    unittest.main()
