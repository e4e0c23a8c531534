# flake8: noqa

from .bech32 import *
from .ed25519 import *
