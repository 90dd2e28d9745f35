"""
shrdlite_exceptions.py

Central exception hierarchy for the Shrdlite planner.
Defines specialized exception classes for the different failure scenarios.

Exception hierarchy:
    ShrdliteException (base)
    ├── WorldException
    │   └── InvalidWorldStateError
    ├── InterpretationException
    │   ├── InterpretationError
    │   └── MalformedLiteralError
    ├── PlanningException
    │   ├── PlanningFailedError
    │   └── PlanExecutionError
    └── ConfigurationException
        └── InvalidConfigError

Note:
    "No plan found" and timeouts are NOT exceptions. The search engine and the
    Planner report them as return values (see PlanOutcome). Exceptions are
    reserved for contract violations by a collaborator (malformed goal
    literals, inconsistent world tables) and for illegal actions reaching the
    execution sink. PlanningFailedError is only raised by the top-level
    Planner.plan() driver when every interpretation failed.

Usage:
    from shrdlite_exceptions import PlanExecutionError

    try:
        world.perform_plan(plan)
    except PlanExecutionError as e:
        logger.error(f"Execution aborted: {e}")
        logger.error(f"Context: {e.context}")
"""

from typing import Any, Dict, Optional


class ShrdliteException(Exception):
    """
    Base exception for all Shrdlite-specific errors.

    All Shrdlite exceptions support:
    - Detailed error messages
    - Contextual information (dict)
    - Original exception chaining (via 'from')
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception

    def __str__(self) -> str:
        base_msg = self.message

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


# ============================================================================
# WORLD EXCEPTIONS
# ============================================================================


class WorldException(ShrdliteException):
    """Base exception for errors in world descriptions."""


class InvalidWorldStateError(WorldException):
    """
    World state violates a structural invariant.

    Causes:
    - Object identifier appears twice (two columns, or column and arm)
    - Arm position outside the column range
    - Object placed in the world without a descriptor
    """

    def __init__(self, message: str, object_id: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if object_id is not None:
            context["object_id"] = object_id
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# INTERPRETATION EXCEPTIONS
# ============================================================================


class InterpretationException(ShrdliteException):
    """Base exception for command and goal interpretation errors."""


class InterpretationError(InterpretationException):
    """
    A parsed command has no interpretation in the current world.

    Causes:
    - No object matches the description
    - Every candidate violates the physical laws
    - The command asks the arm to hold more than one object
    """


class MalformedLiteralError(InterpretationException):
    """
    A goal literal does not have a valid shape.

    Causes:
    - Unknown relation name
    - Wrong number of arguments for the relation
    - Empty goal formula
    - Unparseable literal text
    """

    def __init__(self, message: str, literal: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if literal is not None:
            context["literal"] = literal
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# PLANNING EXCEPTIONS
# ============================================================================


class PlanningException(ShrdliteException):
    """Base exception for planning and plan execution errors."""


class PlanningFailedError(PlanningException):
    """
    No interpretation of a command could be planned.

    Causes:
    - Search exhausted the reachable states
    - Search timed out
    - Goal references objects that are not in the world
    """

    def __init__(self, message: str, reason: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if reason is not None:
            context["reason"] = reason
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class PlanExecutionError(PlanningException):
    """
    An illegal action reached the execution sink.

    Causes:
    - Arm already at the left or right edge
    - Picking while holding, or from an empty column
    - Dropping while empty-handed, or against the physical laws
    """

    def __init__(
        self,
        message: str,
        action: Optional[str] = None,
        step_index: Optional[int] = None,
        **kwargs,
    ):
        context = kwargs.get("context", {})
        context["action"] = action
        context["step_index"] = step_index
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# CONFIGURATION EXCEPTIONS
# ============================================================================


class ConfigurationException(ShrdliteException):
    """Base exception for configuration errors."""


class InvalidConfigError(ConfigurationException):
    """
    Invalid configuration.

    Causes:
    - Unknown heuristic or world name
    - Non-positive timeout or cache size
    - Unreadable configuration or world file
    """


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def wrap_exception(
    exc: Exception,
    shrdlite_exception_class: type[ShrdliteException],
    message: str,
    **context,
) -> ShrdliteException:
    """
    Convert a generic exception into a Shrdlite-specific exception.

    Args:
        exc: Original exception
        shrdlite_exception_class: Target class (e.g. InvalidConfigError)
        message: Custom error message
        **context: Additional context information

    Returns:
        Shrdlite-specific exception chained to the original exception

    Example:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise wrap_exception(e, InvalidConfigError, "Bad world file", path=path)
    """
    return shrdlite_exception_class(
        message=message, context=context, original_exception=exc
    )


def get_user_friendly_message(exc: Exception, include_details: bool = False) -> str:
    """
    Build a user-facing error message from an exception.

    Args:
        exc: Exception object
        include_details: Whether to append technical details (debug mode)

    Returns:
        Message suitable for printing to the user
    """
    friendly_messages = {
        InvalidWorldStateError: "[ERROR] The world description is inconsistent.",
        InterpretationError: "[ERROR] I couldn't find anything matching that description.",
        MalformedLiteralError: "[ERROR] I couldn't understand that goal.",
        PlanningFailedError: "[ERROR] I don't know how to do that.",
        PlanExecutionError: "[ERROR] The robot cannot perform that action.",
        InvalidConfigError: "[ERROR] Invalid configuration. Please check the settings.",
    }

    default_message = "[ERROR] An unexpected error occurred."

    user_message = friendly_messages.get(type(exc), default_message)

    if isinstance(exc, PlanExecutionError):
        user_message = f"[ERROR] {exc.message}"

    elif isinstance(exc, PlanningFailedError) and exc.context.get("reason") == "timeout":
        user_message = "[ERROR] I couldn't find a plan in time."

    if include_details and isinstance(exc, ShrdliteException):
        user_message += f"\n\nTechnical details: {exc.message}"
        if exc.context:
            user_message += f"\n   Context: {exc.context}"

    return user_message
