"""
The WitnessProgram class: a segwit version and program, as carried by native segwit addresses
"""
from bitwallet.core import (Serializable, SERIALIZED, get_stream, read_stream, OPCODES, InvalidProgramLength,
                            InvalidProgramLengthForVersion, InvalidVersion, MismatchedProgramLength)

__all__ = ["WitnessProgram"]

MIN_PROGRAM_LENGTH = 2
MAX_PROGRAM_LENGTH = 40
MAX_VERSION = 16
V0_PROGRAM_LENGTHS = (20, 32)


class WitnessProgram(Serializable):
    """
    WitnessProgram
    -----------------------------------------------------------------
    |   Field               |   Byte Size   |   Format              |
    -----------------------------------------------------------------
    |   Version             |   1           |   0..16               |
    |   Program length      |   1           |   2..40               |
    |   Program             |   var         |   bytes               |
    -----------------------------------------------------------------
    """
    __slots__ = ("version", "program")

    def __init__(self, version: int, program: bytes):
        self.version = version
        self.program = program
        self.validate()

    def validate(self):
        if not MIN_PROGRAM_LENGTH <= len(self.program) <= MAX_PROGRAM_LENGTH:
            raise InvalidProgramLength(
                f"Witness program must be {MIN_PROGRAM_LENGTH}..{MAX_PROGRAM_LENGTH} bytes, found {len(self.program)}")
        if not 0 <= self.version <= MAX_VERSION:
            raise InvalidVersion(f"Witness version must be 0..{MAX_VERSION}, found {self.version}")
        if self.version == 0 and len(self.program) not in V0_PROGRAM_LENGTHS:
            raise InvalidProgramLengthForVersion(
                f"Version 0 witness program must be 20 or 32 bytes, found {len(self.program)}")

    @classmethod
    def from_bytes(cls, byte_stream: SERIALIZED):
        """
        version || declared length || program
        The declared length must match the number of remaining bytes.
        """
        stream = get_stream(byte_stream)
        version = read_stream(stream, 1, "witness version")[0]
        declared_length = read_stream(stream, 1, "witness program length")[0]
        program = stream.read()

        if declared_length != len(program):
            raise MismatchedProgramLength(
                f"Declared witness program length {declared_length} differs from actual length {len(program)}")

        return cls(version, program)

    def to_bytes(self) -> bytes:
        return bytes([self.version, len(self.program)]) + self.program

    def version_opcode(self) -> int:
        """OP_0 for version 0, otherwise OP_1..OP_16"""
        return OPCODES.OP_0 if self.version == 0 else OPCODES.OP_1 + self.version - 1

    def to_script_pub_key(self) -> bytes:
        """Version opcode followed by the pushed program"""
        return bytes([self.version_opcode(), len(self.program)]) + self.program

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "program": self.program.hex()
        }
