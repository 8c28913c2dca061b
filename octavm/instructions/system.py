"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from octavm.state import EmulatorState, instruction_address
from octavm.decode import DecodedInstruction
from octavm.stack import pop


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Machine code routine call, ignored by interpreters."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display), draw_flag=True)


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack, instruction_address(state))
    return state.replace(stack=stack, pc=jnp.asarray(address, dtype=jnp.uint16))
