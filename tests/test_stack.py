"""Tests for the call stack."""

import jax.numpy as jnp
from chipjax import StackState, STACK_SIZE
from chipjax.stack import is_empty, is_full, pop, push


def test_new_stack_is_empty():
    stack = StackState()
    assert bool(is_empty(stack))
    assert not bool(is_full(stack))
    assert stack.data.shape == (STACK_SIZE,)


def test_push_then_pop_is_lifo():
    stack = StackState()
    for address in (0x202, 0x304, 0x406):
        stack = push(stack, jnp.uint16(address))

    popped = []
    for _ in range(3):
        stack, address = pop(stack)
        popped.append(int(address))

    assert popped == [0x406, 0x304, 0x202]
    assert bool(is_empty(stack))


def test_pop_clears_slot():
    stack = push(StackState(), jnp.uint16(0x222))
    stack, _ = pop(stack)
    assert int(stack.data[0]) == 0


def test_push_keeps_full_program_counter():
    """A return address past the end of memory is stored as is."""
    stack = push(StackState(), jnp.uint16(0x1000))
    stack, address = pop(stack)
    assert int(address) == 0x1000


def test_full_after_sixteen_pushes():
    stack = StackState()
    for depth in range(STACK_SIZE):
        assert not bool(is_full(stack))
        stack = push(stack, jnp.uint16(0x200 + 2 * depth))
    assert bool(is_full(stack))
    assert int(stack.pointer) == STACK_SIZE
