import re
from typing import Any, List

from oruspad.builtin_function import BuiltinFunction
from oruspad.environment import Environment
from oruspad.errors import TypeMismatch
from oruspad.types import ArrayVal, to_string, type_name

NUMBER_TEXT = re.compile(r'\s*[+-]?\d+(\.\d+)?([eE][+-]?\d+)?\s*$')


def _numbers(name: str, args: List[Any]) -> List[float]:
    # min/max/sum accept either one array or the values themselves
    values = list(args[0].items) if len(args) == 1 and isinstance(args[0], ArrayVal) else list(args)
    for v in values:
        if not isinstance(v, float):
            raise TypeMismatch(f"{name} expects Numbers, got {type_name(v)}")
    return values


def populate_core_environment(timestamp: float = 0.0) -> Environment:
    """Build the root scope holding the playground's builtin functions.

    `timestamp` is what ``timestamp()`` returns; injecting it keeps runs
    reproducible.
    """
    core_env = Environment()

    def std_len(args: List[Any]) -> Any:
        value = args[0]
        if isinstance(value, (str, ArrayVal)):
            return float(len(value))
        raise TypeMismatch(f"len expects Text or Array, got {type_name(value)}")

    def std_sum(args: List[Any]) -> Any:
        return sum(_numbers('sum', args), 0.0)

    def std_min(args: List[Any]) -> Any:
        values = _numbers('min', args)
        if not values:
            raise TypeMismatch('min of an empty sequence')
        return min(values)

    def std_max(args: List[Any]) -> Any:
        values = _numbers('max', args)
        if not values:
            raise TypeMismatch('max of an empty sequence')
        return max(values)

    def std_type_of(args: List[Any]) -> Any:
        return type_name(args[0])

    def std_str(args: List[Any]) -> Any:
        return to_string(args[0])

    def std_float(args: List[Any]) -> Any:
        value = args[0]
        if isinstance(value, float):
            return value
        if isinstance(value, str) and NUMBER_TEXT.match(value):
            return float(value)
        raise TypeMismatch(f"cannot convert {type_name(value)} {to_string(value)!r} to a Number")

    def std_int(args: List[Any]) -> Any:
        value = std_float(args)
        if value != value or value in (float('inf'), float('-inf')):
            raise TypeMismatch(f"cannot convert {to_string(value)} to an integer")
        return float(int(value))

    def std_push(args: List[Any]) -> Any:
        array, item = args
        if not isinstance(array, ArrayVal):
            raise TypeMismatch(f"push expects an Array, got {type_name(array)}")
        return array.appended(item)

    def std_timestamp(args: List[Any]) -> Any:
        return float(timestamp)

    core_env.values['len'] = BuiltinFunction('len', 1, std_len)
    core_env.values['sum'] = BuiltinFunction('sum', None, std_sum)
    core_env.values['min'] = BuiltinFunction('min', None, std_min)
    core_env.values['max'] = BuiltinFunction('max', None, std_max)
    core_env.values['type_of'] = BuiltinFunction('type_of', 1, std_type_of)
    core_env.values['str'] = BuiltinFunction('str', 1, std_str)
    core_env.values['int'] = BuiltinFunction('int', 1, std_int)
    core_env.values['float'] = BuiltinFunction('float', 1, std_float)
    core_env.values['push'] = BuiltinFunction('push', 2, std_push)
    core_env.values['timestamp'] = BuiltinFunction('timestamp', 0, std_timestamp)

    return core_env
