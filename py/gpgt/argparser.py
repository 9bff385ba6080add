import os

import argparse_subcommand as ap_sub

import base as b
import gpgt.constants as c


class GpgtextArgParser(ap_sub.ArgumentParser):
    """One-trick pony class for obtaining the description only when needed."""

    def format_help(self):
        self.description = f"gpgtext {self.get_version()}: Encrypt and decrypt text with the OpenPGP keys of this host."
        return super().format_help()

    @staticmethod
    def get_version() -> str:
        import tomllib
        # the development tree (and tar version of the package) have this structure:
        #   pyproject.toml
        #   py/gpgt/argparser.py
        # in contrast, the whl version of the package has this structure:
        #   pyproject.toml
        #   gpgt/argparser.py
        # our logic needs to work for both.  We try the whl version first:
        topdir = os.path.dirname(os.path.dirname(__file__))
        pyprojectfile = os.path.join(topdir, "pyproject.toml")
        if not os.path.exists(pyprojectfile):  # we have the tar or development tree here:
            topdir = os.path.dirname(topdir)  # go from py to top in dev tree
            pyprojectfile = os.path.join(topdir, "pyproject.toml")
        if not os.path.exists(pyprojectfile):  # installed without pyproject.toml
            return "(unknown version)"
        with open(pyprojectfile, 'rb') as f:
            toml = tomllib.load(f)
            return toml['tool']['poetry']['version']


def add_common_arguments(subparser):
    """--config and --log, which every subcommand has."""
    subparser.add_argument('--config', metavar="configfile", default=None,
                           help=f"gpgtext configuration YAML file (default: {c.CONFIG_FILENAME} if present)")
    subparser.add_argument('--log', default="WARNING", choices=b.loglevels.keys(),
                           help="Log level for logging to stdout (default: WARNING)")


def add_input_argument(subparser):
    subparser.add_argument('infile', nargs='?', default=None,
                           help="file to read the text from (default: stdin)")


def read_input(infile: b.OStr) -> str:
    return b.slurp(infile) if infile else b.slurp_stdin()
