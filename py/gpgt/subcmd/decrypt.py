import argparse

import base as b
import gpgt.argparser
import gpgt.config
import gpgt.wrapper

meaning = """Decrypts armored text and prints the plaintext."""


def add_arguments(subparser: argparse.ArgumentParser):
    subparser.add_argument('--fingerprint', '-f', metavar="fingerprint", required=True,
                           help="fingerprint of the key the text was encrypted for")
    gpgt.argparser.add_input_argument(subparser)
    gpgt.argparser.add_common_arguments(subparser)


def execute(pargs: argparse.Namespace):
    b.set_loglevel(pargs.log)
    config = gpgt.config.from_commandline(pargs.config)
    wrapper = gpgt.wrapper.GPGWrapper(config, autoload=False)
    result = wrapper.decrypt(gpgt.argparser.read_input(pargs.infile), pargs.fingerprint)
    if not result.success:
        b.critical(result.error_message)
    print(result.result_string, end='')
