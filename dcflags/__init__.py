__version__ = "0.1.0"


from . import conf as conf
from . import extras as extras
from ._cli import cli as cli
from ._cli import parse as parse
from ._cli import parse_argv as parse_argv
from ._errors import DuplicateFlagError as DuplicateFlagError
from ._errors import EmptyInputError as EmptyInputError
from ._errors import EmptySliceError as EmptySliceError
from ._errors import HelpRequested as HelpRequested
from ._errors import InvalidSliceElementError as InvalidSliceElementError
from ._errors import InvalidValueError as InvalidValueError
from ._errors import MissingRequiredFlagError as MissingRequiredFlagError
from ._errors import MissingRequiredPositionalError as MissingRequiredPositionalError
from ._errors import MissingSubcommandError as MissingSubcommandError
from ._errors import MissingValueError as MissingValueError
from ._errors import MixedSyntaxError as MixedSyntaxError
from ._errors import ParseError as ParseError
from ._errors import SchemaDefinitionError as SchemaDefinitionError
from ._errors import UnexpectedArgumentError as UnexpectedArgumentError
from ._errors import UnknownFlagError as UnknownFlagError
from ._errors import UnknownSubcommandError as UnknownSubcommandError
from ._singleton import MISSING as MISSING
