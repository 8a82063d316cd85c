# Test runner that uses the test model in tests/arraypath.json.

import os
import copy
import json
import re
import traceback
from typing import Any, Dict, Callable, TypedDict, Optional


NULLMARK = '__NULL__'  # Value is JSON null
UNDEFMARK = '__UNDEF__'  # Value is not present (thus, undefined)


class RunPack(TypedDict):
    spec: Dict[str, Any]
    runset: Callable
    runsetflags: Callable
    subject: Callable
    client: Optional[Any]


def makeRunner(testfile: str, client: Any):

    def runner(
        name: str,
    ) -> RunPack:
        utility = client.utility()
        arrayUtils = utility.arrays

        spec = resolve_spec(name, testfile)
        subject = resolve_subject(name, utility)

        def runsetflags(testspec, flags, testsubject):
            nonlocal subject

            subject = testsubject or subject
            flags = resolve_flags(flags)
            testspecmap = fixJSON(testspec, flags)
            testset = testspecmap['set']

            for entry in testset:
                try:
                    entry = resolve_entry(entry, flags)
                    args = resolve_args(entry)

                    res = subject(*args)
                    res = fixJSON(res, flags)
                    entry['res'] = res
                    check_result(entry, res, arrayUtils)

                except Exception as err:
                    handle_error(entry, err, arrayUtils)

        def runset(testspec, testsubject):
            return runsetflags(testspec, {}, testsubject)

        runpack = {
            "spec": spec,
            "runset": runset,
            "runsetflags": runsetflags,
            "subject": subject,
            "client": client
        }

        return runpack

    return runner


def resolve_spec(name: str, testfile: str) -> Dict[str, Any]:
    with open(os.path.join(os.path.dirname(__file__), testfile), 'r', encoding='utf-8') as f:
        alltests = json.load(f)

    if name in alltests:
        spec = alltests[name]
    else:
        spec = alltests

    return spec


def resolve_subject(name: str, container: Any):
    return getattr(container, name, getattr(container.arrays, name, None))


def check_result(entry, res, arrayUtils):
    matched = False

    if 'match' in entry:
        result = {'in': entry.get('in'), 'out': entry.get('res')}
        match(entry['match'], result, arrayUtils)
        matched = True

    out = entry.get('out')

    if out == res:
        return

    # NOTE: allow match with no out
    if matched and (NULLMARK == out or out is None):
        return

    # JSON object keys are strings, so compare the JSON forms.
    try:
        cleaned_res = json.loads(json.dumps(res, default=str))
    except (TypeError, ValueError):
        cleaned_res = res

    if cleaned_res != out:
        raise AssertionError(
            f"Expected: {out}, got: {cleaned_res}\n"
            f"Entry: {json.dumps(entry, indent=2, default=jsonfallback)}"
        )


def handle_error(entry, err, arrayUtils):
    entry['thrown'] = err
    entry_err = entry.get('err')

    # If the test expects an error
    if entry_err is not None:
        if entry_err is True or matchval(entry_err, str(err)) or \
           matchval(entry_err, type(err).__name__):
            if 'match' in entry:
                match(
                    entry['match'],
                    {
                        'in': entry.get('in'),
                        'out': entry.get('res'),
                        'err': {'name': type(err).__name__, 'message': str(err)},
                    },
                    arrayUtils
                )
            # Error was expected, continue
            return True

        raise AssertionError(
            f"ERROR MATCH: [{entry_err}] <=> [{type(err).__name__}: {str(err)}]"
        )

    elif isinstance(err, AssertionError):
        raise AssertionError(
            f"{str(err)}\n\nENTRY: {json.dumps(entry, indent=2, default=jsonfallback)}"
        )

    else:
        raise AssertionError(
            f"{traceback.format_exc()}\nENTRY: "+
            f"{json.dumps(entry, indent=2, default=jsonfallback)}"
        )


def resolve_args(entry):
    args = []

    if 'args' in entry:
        args = copy.deepcopy(entry['args'])
    elif 'in' in entry:
        args = [copy.deepcopy(entry['in'])]

    return [None if NULLMARK == arg else arg for arg in args]


def resolve_flags(flags: Dict[str, Any] = None) -> Dict[str, bool]:
    if flags is None:
        flags = {}

    flags["null"] = flags.get("null", True)

    return flags


def resolve_entry(
        entry: Dict[str, Any],
        flags: Dict[str, bool]
) -> Dict[str, Any]:

    # Set default output value for missing 'out' field
    if 'out' not in entry and flags.get("null", True):
        entry["out"] = NULLMARK

    return entry


def fixJSON(obj, flags):
    # Handle nulls
    if obj is None:
        return NULLMARK if flags.get("null", True) else None

    # Handle errors
    if isinstance(obj, Exception):
        return {
            'name': type(obj).__name__,
            'message': str(obj)
        }

    # Handle collections recursively
    elif isinstance(obj, (list, tuple)):
        return [fixJSON(item, flags) for item in obj]
    elif isinstance(obj, dict):
        return {k: fixJSON(v, flags) for k, v in obj.items()}

    return obj


def jsonfallback(obj):
    return f"<non-serializable: {type(obj).__name__}>"


def match(check, base, arrayUtils):
    base = copy.deepcopy(base)

    def walk_apply(val, path):
        if arrayUtils.iscontainer(val):
            for ckey, child in arrayUtils.items(val):
                walk_apply(child, path + [ckey])
            return

        baseval = arrayUtils.get(base, path)

        if baseval == val:
            return

        # Explicit undefined expected
        if UNDEFMARK == val and baseval is None:
            return

        if not matchval(val, baseval):
            raise AssertionError(
                f"MATCH: {'.'.join(map(str, path))}: [{val}] <=> [{baseval}]"
            )

    walk_apply(check, [])


def matchval(check, base):
    if check == UNDEFMARK or check == NULLMARK:
        check = None

    if check == base:
        return True

    # String-based pattern matching
    if isinstance(check, str):
        base_str = base if isinstance(base, str) else json.dumps(base, default=str)

        # Check for regex pattern with /pattern/ syntax
        regex_match = re.match(r'^/(.+)/$', check)

        if regex_match:
            return re.search(regex_match.group(1), base_str) is not None
        else:
            # Case-insensitive substring check
            return check.lower() in base_str.lower()

    # Functions automatically pass
    elif callable(check):
        return True

    return False


__all__ = [
    'NULLMARK',
    'UNDEFMARK',
    'makeRunner',
]
