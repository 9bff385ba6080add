"""Shortcut typenames, global constants, basic helpers."""
import logging
import os
import re
import sys
import time
import typing as tg

import rich
import rich.markup
import rich.table
import yaml


starttime = time.time()
num_errors = 0
msgs_seen = set()
loglevel = logging.ERROR
loglevels = dict(DEBUG=logging.DEBUG, INFO=logging.INFO, WARNING=logging.WARNING,
                 ERROR=logging.ERROR, CRITICAL=logging.CRITICAL)

OStr = tg.Optional[str]
StrAnyDict = dict[str, tg.Any]  # JSON or YAML structure


def set_loglevel(level: str):
    global loglevels, loglevel
    if level in loglevels:
        loglevel = loglevels[level]
    else:
        pass  # simply ignore nonexisting loglevels


class CriticalError(Exception):
    pass


def copyattrs(context: str, source: StrAnyDict, target: tg.Any,
              mustcopy_attrs: str, cancopy_attrs: str, report_extra=True):
    """
    Copies data from YAML mapping 'source' to class object 'target' and checks attribute set of source.
    mustcopy_attrs and cancopy_attrs are comma-separated attribute name lists.
    mustcopy_attrs must exist; cancopy_attrs are copied only if present (the target keeps its default otherwise).
    Value types are the caller's business.
    Reports problems, using 'context' as location info in the message.
    E.g. copyattrs(configfile, yaml, self, "", "gnupghome,gpgbinary")
    """
    def names_in(attrlist: str) -> list[str]:
        if not attrlist:
            return []
        return [a.strip() for a in attrlist.split(',')]
    mustcopy_names = names_in(mustcopy_attrs)
    cancopy_names = names_in(cancopy_attrs)
    if not source:
        source = dict()
    for mname in mustcopy_names:
        value = source.get(mname, ValueError)
        if value is ValueError:
            critical(f"{context}: required attribute is missing: {mname}")
        setattr(target, mname, value)
    for cname in cancopy_names:
        if cname in source:
            setattr(target, cname, source[cname])
        elif not hasattr(target, cname):
            setattr(target, cname, None)
    extra_attrs = set(source.keys()) - set(mustcopy_names) - set(cancopy_names)
    if report_extra and extra_attrs:
        warning(f"unexpected extra attributes found: {sorted(extra_attrs)}", file=context)


def expandvars(msg: str, context: str) -> str:
    result = os.path.expandvars(msg)
    mm = re.search(r'\$\{|\$\w', result)  # leftover unexpanded variables
    if mm:
        warning(f"env variable undefined in '{result}'", context)
    return result


def slurp(resource: str) -> str:
    """Reads local file as utf8 text."""
    try:
        with open(resource, 'rt', encoding='utf8') as f:
            return f.read()
    except OSError:
        critical(f"'{resource}' does not exist")


def slurp_stdin() -> str:
    return sys.stdin.read()


def slurp_yaml(resource: str) -> StrAnyDict:
    return yaml.safe_load(slurp(resource))


def spit(filename: str, content: str):
    with open(filename, 'wt', encoding='utf8') as f:
        f.write(content)


def spit_yaml(filename: str, content: StrAnyDict):
    spit(filename, yaml.safe_dump(content))


def debug(msg: str):
    if loglevel <= logging.DEBUG:
        rich_print(msg)


def info(msg: str):
    if loglevel <= logging.INFO:
        rich_print(msg, "green")


def warning(msg: str, file: str = None):
    if loglevel <= logging.WARNING:
        msg = _process_params(msg, file)
        rich_print(msg, "yellow")


def error(msg: str, file: str = None):
    if loglevel <= logging.ERROR:
        msg = _process_params(msg, file)
        rich_print(msg, "red", count=1)


def critical(msg: str, file: str = None):
    msg = _process_params(msg, file)
    rich_print(msg, "bold red", count=1)
    raise CriticalError(msg)


def plural_s(number, value="s") -> str:
    return value if number != 1 else ""


def Table() -> rich.table.Table:
    """An empty Table in default gpgtext style"""
    return rich.table.Table(show_header=True, header_style="bold yellow",
                            show_edge=False, show_footer=False)


def rich_print(msg: str, enclose_in_tag: tg.Optional[str] = None, count=0):
    """Print any message, but count each one only once."""
    global num_errors, msgs_seen
    if msg not in msgs_seen:
        msgs_seen.add(msg)
        num_errors += count
    msg = rich.markup.escape(msg)  # key uids contain [brackets] now and then
    if enclose_in_tag:
        msg = f"[{enclose_in_tag}]{msg}[/{enclose_in_tag}]"
    rich.print(msg)


def _process_params(msg: str, file: tg.Optional[str]):
    if file:
        msg = f"File '{file}':\n   {msg}"
    return msg


def _testmode_reset():
    """reset error counter; avoid text wrapping of b.error() etc."""
    global num_errors, msgs_seen, starttime
    starttime = time.time()
    num_errors = 0
    msgs_seen = set()
    rich.get_console()._width = 10000
