class PyChainLibsException(Exception):
    pass


class DecodingException(PyChainLibsException):
    pass


class InvalidKeyTypeException(PyChainLibsException):
    pass


class InvalidAddressInputException(PyChainLibsException):
    pass


class InvalidDataException(PyChainLibsException):
    pass


class InvalidArgumentException(PyChainLibsException):
    pass


class InvalidOperationException(PyChainLibsException):
    pass


class DeserializeException(PyChainLibsException):
    pass


class ValueArithmeticException(PyChainLibsException):
    pass


class ValueOverflowException(ValueArithmeticException):
    pass


class ValueUnderflowException(ValueArithmeticException):
    pass


class InvalidTransactionException(PyChainLibsException):
    pass


class InsufficientFundsException(InvalidTransactionException):
    """Inputs cannot cover outputs plus fee. The deficit is kept in :attr:`balance`."""

    def __init__(self, message: str, balance=None):
        super().__init__(message)
        self.balance = balance


class TransactionBuilderException(PyChainLibsException):
    pass


class StructuralException(TransactionBuilderException):
    pass


class CertificateAlreadySetException(StructuralException):
    pass


class TransactionBuilderConsumedException(StructuralException):
    pass


class WitnessIndexOutOfRangeException(StructuralException):
    pass


class WitnessKindMismatchException(StructuralException):
    pass


class WitnessAlreadySetException(StructuralException):
    pass


class MissingWitnessException(StructuralException):
    def __init__(self, message: str, missing=None):
        super().__init__(message)
        self.missing = list(missing or [])
