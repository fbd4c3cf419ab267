"""Demo generation lifecycle: submission, polling and step selection."""

from demo_client.lifecycle.controller import (
    DemoLifecycleController,
    DemoSource,
    LifecycleSnapshot,
    LifecycleState,
)
from demo_client.lifecycle.steps import StepViewModel
from demo_client.lifecycle.timer import RepeatingTimer

__all__ = [
    "DemoLifecycleController",
    "DemoSource",
    "LifecycleSnapshot",
    "LifecycleState",
    "RepeatingTimer",
    "StepViewModel",
]
