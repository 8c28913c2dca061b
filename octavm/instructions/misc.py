"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from octavm.state import EmulatorState, WaitingForKey, set_register
from octavm.decode import DecodedInstruction
from octavm.constants import FONT_START, FONT_GLYPH_SIZE
from octavm.keypad import pressed_keys
from octavm.memory import read_bytes, write_bytes


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return set_register(state, instruction.x, int(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, wrapping at 16 bits; VF untouched."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & 0xFFFF
    return state.replace(I=jnp.asarray(new_i, dtype=jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for a key press.

    Never blocks: PC is rewound onto this instruction and the executor moves to
    WaitingForKey. Keys already down at this point must be released and pressed
    again before they count.
    """
    return state.replace(
        pc=state.pc - 2,
        status=WaitingForKey(register=instruction.x, held=pressed_keys(state)),
    )


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = int(state.V[instruction.x]) & 0xF
    return state.replace(I=jnp.asarray(FONT_START + digit * FONT_GLYPH_SIZE, dtype=jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = [value // 100, (value // 10) % 10, value % 10]
    return write_bytes(state, int(state.I), digits)


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    if state.quirks.load_store_quirk:
        return state
    return state.replace(I=jnp.asarray((int(state.I) + instruction.x + 1) & 0xFFFF, dtype=jnp.uint16))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    state = write_bytes(state, int(state.I), state.V[:instruction.x + 1])
    return _advance_index(state, instruction)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    values = read_bytes(state, int(state.I), instruction.x + 1)
    state = state.replace(V=state.V.at[:instruction.x + 1].set(values))
    return _advance_index(state, instruction)
