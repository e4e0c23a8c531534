# flake8: noqa

from .account import *
from .address import *
from .certificate import *
from .crypto import *
from .exception import *
from .fee import *
from .hash import *
from .key import *
from .network import *
from .serialization import *
from .transaction import *
from .txbuilder import *
from .value import *
from .witness import *
