import argparse

import base as b
import gpgt.argparser
import gpgt.config
import gpgt.wrapper

meaning = """Encrypts text for one recipient key (or with a passphrase) and prints the armored result."""


def add_arguments(subparser: argparse.ArgumentParser):
    subparser.add_argument('--fingerprint', '-f', metavar="fingerprint", default="",
                           help="fingerprint of the recipient's key (exactly as gpg shows it)")
    subparser.add_argument('--recipient', '-r', metavar="mailaddress", default="",
                           help="mail address used for finding the recipient's key")
    subparser.add_argument('--symmetric', '-s', action='store_true', default=False,
                           help="encrypt with the passphrase from the passphrase env variable instead of a key")
    gpgt.argparser.add_input_argument(subparser)
    gpgt.argparser.add_common_arguments(subparser)


def execute(pargs: argparse.Namespace):
    b.set_loglevel(pargs.log)
    if not pargs.symmetric and not pargs.fingerprint:
        b.critical("--fingerprint is required unless --symmetric is given")
    config = gpgt.config.from_commandline(pargs.config)
    wrapper = gpgt.wrapper.GPGWrapper(config, autoload=False)
    text = gpgt.argparser.read_input(pargs.infile)
    result = wrapper.encrypt(text, pargs.fingerprint, pargs.recipient, symmetric=pargs.symmetric)
    if not result.success:
        b.critical(result.error_message)
    print(result.result_string, end='')
