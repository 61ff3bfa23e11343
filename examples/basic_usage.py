#!/usr/bin/env python3
"""
Basic usage examples for the inline-eval library.

This script drives a headless editor through a few command cycles and
prints the buffer with its inline results after each step.
"""

import os
import sys

# Add parent directory to path for development
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from inline_eval import (
    AnnotationManager,
    AnnotationOptions,
    MemoryEditor,
    PythonEvaluator,
    RemovalPolicy,
    Span,
    get_command,
)


def example_eval_last_expression():
    """Example: Evaluate two lines in successive commands."""
    print("=" * 60)
    print("Example 1: Result shown until the next command")
    print("=" * 60)

    editor = MemoryEditor(width=60)
    buffer = editor.open("total = sum(range(10))\ntotal * 2", name="session.py")
    manager = AnnotationManager(editor, evaluator=PythonEvaluator())

    with editor.command(buffer):
        manager.evaluate_and_annotate(Span(0, buffer.line_end(0)))
    with editor.command(buffer):
        get_command("eval-line")(manager)
        print(buffer.render())

    with editor.command(buffer):
        print("\nAfter the next command:")
        print(buffer.render())

    print("\nStatus line:", editor.messages)


def example_timed_result():
    """Example: Keep a result for a few seconds."""
    print("\n" + "=" * 60)
    print("Example 2: Result removed after a delay")
    print("=" * 60)

    editor = MemoryEditor()
    buffer = editor.open("[n * n for n in range(5)]")
    manager = AnnotationManager(editor)

    value = PythonEvaluator().evaluate(buffer.text)
    manager.create(value, options=AnnotationOptions(removal_policy=RemovalPolicy.after(2)))
    print(buffer.render())

    editor.advance(2)
    print("\nTwo seconds later:")
    print(buffer.render())


def example_long_result():
    """Example: Long results move below the code and are truncated."""
    print("\n" + "=" * 60)
    print("Example 3: Long result in a narrow viewport")
    print("=" * 60)

    editor = MemoryEditor(width=30)
    buffer = editor.open("list(range(100))")
    manager = AnnotationManager(editor, evaluator=PythonEvaluator())

    with editor.command(buffer):
        get_command("eval-last-expression")(manager)
        print(buffer.render())


if __name__ == "__main__":
    example_eval_last_expression()
    example_timed_result()
    example_long_result()
