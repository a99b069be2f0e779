# Tally Copyright (c) 2023-present NAVER Corporation
# Please refer to the license file provided in the project.

import argparse
import copy
import yaml
from typing import Optional, Union, Any, get_args, get_origin


class argument:
    def __init__(
        self,
        default: Optional[Any] = None,
        help: Optional[str] = None,
        aliases: list[str] = [],
        choices: Optional[list[Any]] = None,
    ):
        self.default = default
        self.help = help
        self.aliases = aliases
        self.choices = choices


def is_optional(type_):
    """ Returns True for Optional[T] types """
    types = get_args(type_)
    return get_origin(type_) is Union and len(types) == 2 and type(None) in types

def optional_type(type_):
    """ Optional[T] -> T """
    return next(t for t in get_args(type_) if t is not type(None))


class Config:
    @classmethod
    def arguments(cls) -> list[argument]:
        """
        Get the list of arguments of this configuration. Uses the type annotations to specify the argument's `type`
        and `name` attributes. The default values, help message and other fields are specified through the `argument`
        class constructor.
        """
        arguments = {}

        for cls in reversed(cls.__mro__[:-1]):  # from super classes to sub classes (Config -> ... -> cls)
            annotations = cls.__dict__.get('__annotations__', {})
            for name, type in annotations.items():
                arg = cls.__dict__.get(name)
                if isinstance(arg, argument):
                    arg = copy.copy(arg)  # don't modify the class attribute
                    arg.type = type
                    arg.name = name
                    arguments[name] = arg

        return list(arguments.values())

    def __init__(self, *opts: str, strict: bool = True, **kwargs):
        """
        Can be initialized with a list of command line options, or keyword arguments (or both, in which case
        command line options have precedence):

        ```
        cfg = TallyConfig('--input', 'items.txt', marker='#')
        cfg.as_dict()
        {
            'input': 'items.txt',
            'marker': '#',
            ...
        }
        ```
        """
        for arg in self.arguments():
            setattr(self, arg.name, arg.default)

        self.parse_dict(kwargs, strict=strict)
        self.parse_args(list(opts), strict=strict)

    def as_dict(self) -> dict:
        """ Convert this configuration into a Python dictionary """
        cfg = {
            arg.name: getattr(self, arg.name)
            for arg in self.arguments()
        }
        return dict(sorted(cfg.items()))

    def parse_dict(self, config: dict[str, Any], strict: bool = False) -> dict[str, Any]:
        """
        Initialize this config's attributes with given dictionary, whose keys correspond to argument names.
        Also checks that the given values have the right type for the corresponding arguments.
        If `strict` is False, unknown options are allowed and are returned by this method.
        """
        names = {arg.name for arg in self.arguments()}
        unknown_config = {}

        for name, value in config.items():
            name = name.replace('-', '_')
            if name in names:
                self._check_type(name, value)
                setattr(self, name, value)
            else:
                unknown_config[name] = value

        if unknown_config and strict:
            raise AttributeError("unknown option(s): " + ', '.join(unknown_config))

        return unknown_config

    def get_parser(self, add_help: bool = False) -> argparse.ArgumentParser:
        """
        Create an `argparse` parser to parse command-line arguments (with `parse_args`) and initialize this config's
        attributes with those.
        """
        parser = argparse.ArgumentParser(add_help=add_help, allow_abbrev=False)

        for arg in self.arguments():
            name = '--' + arg.name.strip('_').replace('_', '-')

            type_ = arg.type
            if is_optional(type_):
                type_ = optional_type(type_)

            if type_ not in (bool, int, float, str):
                raise NotImplementedError

            opts = {}
            if type_ is bool:
                opts['action'] = argparse.BooleanOptionalAction
            else:
                opts['type'] = type_

            parser.add_argument(
                name,
                *arg.aliases,
                dest=arg.name,
                default=getattr(self, arg.name),
                help=arg.help,
                choices=arg.choices,
                **opts,
            )

        return parser

    def parse_args(self, opts: Optional[list[str]] = None, strict: bool = False, add_help: bool = False) -> list[str]:
        """
        Parse given command-line options or the main program's options (`sys.argv[1:]`) if none are given
        and initialize this config's attributes with the parsed options.
        For instance, the command-line arguments `--output counts.txt` will set the attribute named `output` to
        'counts.txt'.

        If `strict` is False, unknown options are allowed and are returned by this method.
        """
        parser = self.get_parser(add_help=add_help)
        namespace, other_opts = parser.parse_known_args(opts)

        for name, value in namespace.__dict__.items():
            setattr(self, name, value)

        if other_opts and strict:
            raise AttributeError("unknown option(s): " + ' '.join(other_opts))

        return other_opts

    def _check_type(self, name, value):
        """
        Check that given `value` has the correct type for argument `name`
        """
        arg = next(arg for arg in self.arguments() if arg.name == name)
        type_ = arg.type

        if is_optional(type_):
            if value is None:
                return
            type_ = optional_type(type_)
        elif value is None:
            raise ValueError(f"option '{name}' cannot be None")

        # True and False are not accepted as numbers
        valid = isinstance(value, type_) and not (type_ is not bool and isinstance(value, bool))
        valid = valid or type_ is float and isinstance(value, int) and not isinstance(value, bool)
        if not valid:
            raise ValueError(
                f"option '{name}' expects values of type '{type_.__name__}', got '{type(value).__name__}'"
            )
        if arg.choices and value not in arg.choices:
            raise ValueError(f"{repr(value)} is not a valid choice for option '{name}'")


class TallyConfig(Config):
    config: Optional[str] = argument(
        help='YAML configuration file, whose options have lower precedence than command line options',
    )
    input: str = argument(
        default='CS210_Project_Three_Input_File.txt',
        aliases=['-i'],
        help='text file whose whitespace-delimited items are counted (default: %(default)s)',
    )
    output: str = argument(
        default='frequency.dat',
        aliases=['-o'],
        help='file where the item counts are saved on exit, one "item count" pair per line (default: %(default)s)',
    )
    marker: str = argument(
        default='*',
        help='character used to draw the histogram bars (default: %(default)s)',
    )
    strict_lookup: bool = argument(
        default=False,
        help='searching for an unknown item does not add it to the counts',
    )
    log_file: Optional[str] = argument(
        help='also write logs to this file',
    )
    verbose: bool = argument(
        default=False,
        aliases=['-v'],
        help='verbose mode',
    )

    def __init__(self, *opts: str, strict: bool = True, **kwargs):
        """
        Options can be specified in 3 different ways (from lowest to highest precedence):

        - YAML config file (given as 'config' argument via `opts` or `kwargs`)
        - keyword arguments (given via `kwargs`)
        - command line arguments (given via `opts`, e.g., `TallyConfig(*sys.argv[1:])`)
        """
        opts = list(opts)
        super().__init__(*opts, strict=False, **kwargs)  # to get '--config'

        parse_help(opts, self)

        if self.config:
            with open(self.config) as config_file:
                yaml_opts = yaml.safe_load(config_file) or {}
            self.parse_dict(yaml_opts, strict=strict)
            self.parse_dict(kwargs, strict=strict)
            self.parse_args(opts, strict=strict)
        elif strict:
            self.parse_dict(kwargs, strict=True)
            self.parse_args(opts, strict=True)

        self.finalize()

    def finalize(self):
        if len(self.marker) != 1:
            raise ValueError(f"--marker must be a single character, got {repr(self.marker)}")


def parse_help(opts: list[str], *configs: Config):
    if '-h' in opts or '--help' in opts:
        parsers = [
            cfg.get_parser(add_help=False) for cfg in configs
        ]
        parser = argparse.ArgumentParser(parents=parsers, conflict_handler='resolve')
        parser.parse_args(['-h'])
