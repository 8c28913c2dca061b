"""CHIP-8 interpreter errors."""


class Chip8Error(Exception):
    """Base class for every error raised by the interpreter."""


class RomTooLarge(Chip8Error):
    """Program does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"ROM of {size} bytes exceeds the {limit} bytes available")


class InvalidKeyIndex(Chip8Error):
    """Key index outside 0x0-0xF."""

    def __init__(self, index):
        self.index = index
        super().__init__(f"Invalid key index {index!r}, expected 0-15")


class ExecutionError(Chip8Error):
    """Fault raised while executing an instruction; halts the interpreter."""


class InvalidOpcode(ExecutionError):
    """Fetched word does not match any known instruction."""

    def __init__(self, address, word: int):
        self.address = address
        self.word = word
        location = f" at 0x{address:03X}" if address is not None else ""
        super().__init__(f"Invalid opcode 0x{word:04X}{location}")


class StackOverflow(ExecutionError):
    """CALL with all 16 stack slots in use."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Stack overflow at 0x{address:03X}: more than 16 nested calls")


class StackUnderflow(ExecutionError):
    """RET with an empty stack."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Stack underflow at 0x{address:03X}: return with an empty stack")


class OutOfBoundsMemoryAccess(ExecutionError):
    """Memory access outside 0x000-0xFFF."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Out of bounds memory access at 0x{address:X}")
