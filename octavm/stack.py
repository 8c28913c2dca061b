"""CHIP-8 stack operations."""

import jax.numpy as jnp
from octavm.constants import STACK_SIZE
from octavm.errors import StackOverflow, StackUnderflow
from octavm.state import StackState


def push(stack: StackState, address: int, caller: int) -> StackState:
    """Push a return address onto the stack.

    ``caller`` is the address of the CALL, reported on overflow.
    """
    if stack.pointer >= STACK_SIZE:
        raise StackOverflow(caller)
    new_data = stack.data.at[stack.pointer].set(int(address) & 0xFFFF)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState, caller: int) -> tuple[StackState, int]:
    """Pop the most recent return address; ``caller`` is the RET's address."""
    if stack.pointer <= 0:
        raise StackUnderflow(caller)
    new_pointer = stack.pointer - 1
    popped_address = int(stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address


def depth(stack: StackState) -> int:
    return int(stack.pointer)


def return_addresses(stack: StackState) -> list[int]:
    """Stacked return addresses, oldest first."""
    return [int(a) for a in jnp.asarray(stack.data[:stack.pointer])]
