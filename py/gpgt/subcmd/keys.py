import argparse

import rich
import rich.markup

import base as b
import gpgt.argparser
import gpgt.config
import gpgt.resolver
import gpgt.wrapper

meaning = """Lists the OpenPGP keys available on this host."""


def add_arguments(subparser: argparse.ArgumentParser):
    subparser.add_argument('--pattern', metavar="searchpattern", default=None,
                           help="only list keys matching this name, mail address, or fingerprint "
                                "(default: 'search_pattern:' from the config, else all keys)")
    subparser.add_argument('--mail', metavar="mailaddress", default="",
                           help="mark keys having a mail address that contains this string")
    gpgt.argparser.add_common_arguments(subparser)


def execute(pargs: argparse.Namespace):
    b.set_loglevel(pargs.log)
    config = gpgt.config.from_commandline(pargs.config)
    wrapper = gpgt.wrapper.GPGWrapper(config, autoload=False)
    pattern = config.search_pattern if pargs.pattern is None else pargs.pattern
    result = wrapper.load_keys(pattern)
    if not result.success:
        b.critical(result.error_message)
    rich.print(keys_table(wrapper.get_keys(), pargs.mail))
    b.info(f"{wrapper.get_num_keys()} key{b.plural_s(wrapper.get_num_keys())}")


def keys_table(keys, mail: str):
    table = b.Table()
    table.add_column("#", justify="right")
    table.add_column("fingerprint")
    table.add_column("name")
    table.add_column("mail addresses")
    table.add_column("expires")
    for idx, details in enumerate(keys):
        marker = "*" if mail and gpgt.resolver.is_preferred_key(details, mail) else ""
        table.add_row(f"{marker}{idx}", details.fingerprint, rich.markup.escape(details.name),
                      ", ".join(details.mail_addresses),
                      details.expiry_date.strftime("%Y-%m-%d") if details.expiry_date else "never")
    return table
