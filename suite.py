"""
a small test registry for the querypipe suites.

each test module registers its cases with `@test` and can run itself with
`suite.run(...)`; pytest collects the same `test_*` functions. failures that
come out of a pipeline are reported with the record and role that broke,
followed by the chain of exceptions that caused them.
"""
import time
from functools import wraps
from typing import List, Dict, Any, Callable, Optional, Type

from querypipe import InvalidKeyError

_suite_state: Dict[str, List[Dict[str, Any]]] = {
    'tests': [],
    'results': []
}

PASS_MARK = '(^ ω ^)'
FAIL_MARK = '(ﾉಥДಥ)ﾉ'


class _c:
    ok = '\033[92m'
    fail = '\033[91m'
    warn = '\033[93m'
    info = '\033[94m'
    grey = '\033[90m'
    reset = '\033[0m'


class SuiteAssertionError(AssertionError):
    """raised by assert_that/assert_raises, reported without a type prefix."""
    pass

# --- public api ---

def test(description: str) -> Callable:
    """decorator to register a function as a test case. pytest collects the same function."""

    def decorator(func: Callable) -> Callable:
        _suite_state['tests'].append({'func': func, 'description': description})

        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        return wrapper

    return decorator


def assert_that(condition: Any, message: str = "assertion failed") -> None:
    if not condition:
        raise SuiteAssertionError(message)


def assert_raises(error_type: Type[BaseException], func: Callable[[], Any],
                  message: Optional[str] = None) -> BaseException:
    """call func and require it to raise error_type; returns the raised error for inspection."""
    try:
        func()
    except error_type as e:
        return e
    except Exception as e:
        raise SuiteAssertionError(
            f"{message or 'wrong error'}: expected {error_type.__name__}, got {type(e).__name__}") from e
    raise SuiteAssertionError(f"{message or 'no error'}: expected {error_type.__name__} to be raised")


def describe_failure(error: BaseException) -> List[str]:
    """
    report lines for a failed test, outermost error first.
    an InvalidKeyError is split into role, reason and record, and every
    chained `__cause__` gets its own line so the root of a pipeline failure
    is visible without a traceback.
    """
    lines = []
    current: Optional[BaseException] = error
    while current is not None:
        prefix = "caused by " if lines else ""
        if isinstance(current, SuiteAssertionError):
            lines.append(f"{prefix}assertion failed: {current}")
        elif isinstance(current, InvalidKeyError):
            lines.append(f"{prefix}{type(current).__name__} in {current.role}: {current.reason}")
            lines.append(f"  record: {current.record!r}")
        else:
            lines.append(f"{prefix}{type(current).__name__}: {current}")
        current = current.__cause__
    return lines


def run(title: str = "test run") -> int:
    """executes all registered tests, prints a report and returns the failure count."""
    print(f"\n{_c.info}--- starting: {title} ---{_c.reset}")
    start_time = time.perf_counter()

    _suite_state['results'] = []

    for test_item in _suite_state['tests']:
        description = test_item['description']
        error, raised = None, False

        try:
            test_item['func']()
        except Exception as e:
            error = describe_failure(e)
            raised = not isinstance(e, SuiteAssertionError)

        passed = error is None
        _suite_state['results'].append(
            {'passed': passed, 'raised': raised, 'description': description, 'error': error})

        if passed:
            print(f"  {_c.ok}✔ pass{_c.reset}  {PASS_MARK}  {description}")
        else:
            print(f"  {_c.fail}✖ fail{_c.reset}  {FAIL_MARK}  {description}")
            for line in error:
                print(f"    {_c.grey}└─> {line}{_c.reset}")

    failed_count = _print_summary(start_time)

    # clear tests after run to allow for multiple, separate suite runs in a single script
    _suite_state['tests'] = []
    return failed_count


def _print_summary(start_time: float) -> int:
    duration = (time.perf_counter() - start_time) * 1000
    results = _suite_state['results']

    total = len(results)
    passed_count = sum(1 for r in results if r['passed'])
    failed_count = total - passed_count
    raised_count = sum(1 for r in results if r['raised'])

    summary_color = _c.ok if failed_count == 0 else _c.fail

    print(f"\n{summary_color}--- summary ---{_c.reset}")
    print(f"  ran {_c.info}{total}{_c.reset} tests in {_c.warn}{duration:.2f}ms{_c.reset}")
    print(f"  {_c.ok}passed: {passed_count}{_c.reset}, {_c.fail}failed: {failed_count}{_c.reset}"
          f" ({raised_count} raised instead of asserting)")
    print(f"{summary_color}---------------{_c.reset}\n")
    return failed_count
