"""
Test suite for the Monkey evaluator
Verifies values, control flow, closures, builtins and runtime errors
"""

import io
import pytest
import sys
import os

# Add grandparent directory to path for imports (to find monkey_runtime package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from monkey_runtime.environment import Environment
from monkey_runtime.errors import E_INVALID_NODE, MonkeyError
from monkey_runtime.evaluator import Evaluator, evaluate
from monkey_runtime.objects import (
    FALSE, NULL, TRUE, Array, Error, Function, Hash, Integer, String,
)
from monkey_runtime.parser import parse


def run(source, evaluator=None, env=None):
    program, errors = parse(source)
    assert errors == []
    evaluator = evaluator or Evaluator()
    return evaluator.run(program, env if env is not None else Environment())


class TestIntegers:
    """Test integer arithmetic"""

    @pytest.mark.parametrize('source,expected', [
        ('5', 5),
        ('-10', -10),
        ('5 + 5 + 5 + 5 - 10', 10),
        ('2 * 2 * 2 * 2 * 2', 32),
        ('-50 + 100 + -50', 0),
        ('20 + 2 * -10', 0),
        ('50 / 2 * 2 + 10', 60),
        ('3 * (3 * 3) + 10', 37),
        ('(5 + 10 * 2 + 15 / 3) * 2 + -10', 50),
        ('7 / 2', 3),
        ('-7 / 2', -3),
        ('7 / -2', -3),
    ])
    def test_arithmetic(self, source, expected):
        assert run(source) == Integer(expected)

    def test_division_by_zero(self):
        assert run('1 / 0') == Error('division by zero')

    def test_overflow(self):
        assert run('9223372036854775807 + 1') == Error(
            'integer overflow: 9223372036854775807 + 1')
        assert run('-9223372036854775807 - 1') == Integer(-2 ** 63)


class TestBooleans:
    """Test comparisons and the bang operator"""

    @pytest.mark.parametrize('source,expected', [
        ('true', TRUE),
        ('false', FALSE),
        ('1 < 2', TRUE),
        ('1 > 2', FALSE),
        ('1 == 1', TRUE),
        ('1 != 1', FALSE),
        ('true == true', TRUE),
        ('true != false', TRUE),
        ('(1 < 2) == true', TRUE),
        ('(1 > 2) == true', FALSE),
        ('1 == true', FALSE),
        ('!true', FALSE),
        ('!5', FALSE),
        ('!0', FALSE),
        ('!!true', TRUE),
    ])
    def test_boolean_expressions(self, source, expected):
        assert run(source) is expected


class TestConditionals:
    """Test if/else"""

    @pytest.mark.parametrize('source,expected', [
        ('if (true) { 10 }', Integer(10)),
        ('if (false) { 10 }', NULL),
        ('if (1) { 10 }', Integer(10)),
        ('if (0) { 10 } else { 20 }', Integer(10)),
        ('if (1 > 2) { 10 } else { 20 }', Integer(20)),
        ('if (1 < 2) { 10 } else { 20 }', Integer(10)),
    ])
    def test_if(self, source, expected):
        assert run(source) == expected


class TestReturn:
    """Test return statements"""

    @pytest.mark.parametrize('source,expected', [
        ('return 10;', 10),
        ('return 10; 9;', 10),
        ('return 2 * 5; 9;', 10),
        ('9; return 2 * 5; 9;', 10),
        ('if (10 > 1) { if (10 > 1) { return 10; } return 1; }', 10),
    ])
    def test_return(self, source, expected):
        assert run(source) == Integer(expected)

    def test_return_inside_function_stops_function_only(self):
        assert run('let f = fn() { return 1; 2 }; f() + 10') == Integer(11)


class TestBindings:
    """Test let statements and identifiers"""

    @pytest.mark.parametrize('source,expected', [
        ('let a = 5; a;', 5),
        ('let a = 5 * 5; a;', 25),
        ('let a = 5; let b = a; b;', 5),
        ('let a = 5; let b = a; let c = a + b + 5; c;', 15),
    ])
    def test_let(self, source, expected):
        assert run(source) == Integer(expected)

    def test_let_writes_given_env(self):
        env = Environment()
        run('let x = 3;', env=env)
        assert env.get('x') == Integer(3)

    def test_unbound_identifier(self):
        assert run('foobar') == Error('identifier not found: foobar')


class TestFunctions:
    """Test function literals, calls and closures"""

    def test_function_object(self):
        result = run('fn(x) { x + 2; };')
        assert isinstance(result, Function)
        assert [p.name for p in result.parameters] == ['x']
        assert str(result.body) == '{ (x + 2) }'

    @pytest.mark.parametrize('source,expected', [
        ('let identity = fn(x) { x; }; identity(5);', 5),
        ('let identity = fn(x) { return x; }; identity(5);', 5),
        ('let double = fn(x) { x * 2; }; double(5);', 10),
        ('let add = fn(x, y) { x + y; }; add(5, 5);', 10),
        ('let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));', 20),
        ('fn(x) { x; }(5)', 5),
    ])
    def test_application(self, source, expected):
        assert run(source) == Integer(expected)

    def test_closure(self):
        source = """
        let newAdder = fn(x) { fn(y) { x + y }; };
        let addTwo = newAdder(2);
        addTwo(2);
        """
        assert run(source) == Integer(4)

    def test_closure_outlives_defining_call(self):
        source = """
        let makeCounter = fn(start) { let x = start; fn() { x } };
        let a = makeCounter(1);
        let b = makeCounter(2);
        a() + b() * 10
        """
        assert run(source) == Integer(21)

    def test_lexical_not_dynamic_scope(self):
        source = """
        let x = 1;
        let getX = fn() { x };
        let callWithX = fn(x) { getX() };
        callWithX(100)
        """
        assert run(source) == Integer(1)

    def test_call_does_not_leak_bindings(self):
        env = Environment()
        run('let f = fn(a) { let inner = a; inner }; f(1);', env=env)
        assert env.get('inner') is None
        assert env.get('a') is None

    def test_recursion(self):
        source = """
        let fib = fn(n) { if (n < 2) { n } else { fib(n - 1) + fib(n - 2) } };
        fib(15)
        """
        assert run(source) == Integer(610)

    def test_wrong_argument_count(self):
        assert run('fn(x, y) { x }(1)') == Error('wrong number of arguments: want=2, got=1')

    def test_not_a_function(self):
        assert run('let x = 5; x(1)') == Error('not a function: INTEGER')

    def test_max_depth(self):
        evaluator = Evaluator(max_depth=10)
        result = run('let f = fn(n) { f(n + 1) }; f(0)', evaluator=evaluator)
        assert result == Error('maximum call depth exceeded')
        assert run('let f = fn(n) { if (n > 5) { n } else { f(n + 1) } }; f(0)',
                   evaluator=evaluator) == Integer(6)

    def test_default_depth_allows_ordinary_recursion(self):
        count = 'let c = fn(n) { if (n == 0) { 0 } else { 1 + c(n - 1) } };'
        assert run(count + 'c(100)') == Integer(100)
        assert run(count + 'c(450)') == Integer(450)
        assert run(count + 'c(600)') == Error('maximum call depth exceeded')

    def test_recursive_reduce_over_hundred_elements(self):
        source = """
        let build = fn(n, acc) { if (n == 0) { acc } else { build(n - 1, push(acc, n)) } };
        let reduce = fn(arr, initial, f) {
            let iter = fn(arr, result) {
                if (len(arr) == 0) { result } else { iter(rest(arr), f(result, first(arr))) }
            };
            iter(arr, initial)
        };
        reduce(build(100, []), 0, fn(a, b) { a + b })
        """
        assert run(source) == Integer(5050)

    def test_recursion_limit_restored(self):
        before = sys.getrecursionlimit()
        run('let f = fn(n) { f(n + 1) }; f(0)')
        assert sys.getrecursionlimit() == before


class TestReturnInsideExpressions:
    """A return reached while evaluating an expression leaves the function"""

    @pytest.mark.parametrize('body', [
        'let x = if (true) { return 5; }; 10',
        'id(if (true) { return 5; }) + 1',
        'let arr = [1, if (true) { return 5; }, 3]; 10',
        'let h = {"a": if (true) { return 5; }}; 10',
        'let h = {if (true) { return 5; }: 1}; 10',
        '-if (true) { return 5; }',
        '1 + if (true) { return 5; }',
        'if (if (true) { return 5; }) { 10 }',
        '[1, 2][if (true) { return 5; }]',
        'len(if (true) { return 5; })',
        'return if (true) { return 5; };',
    ])
    def test_return_propagates(self, body):
        source = 'let id = fn(a) { a }; let f = fn() { ' + body + ' }; f()'
        assert run(source) == Integer(5)

    def test_return_in_argument_at_top_level(self):
        env = Environment()
        assert run('let id = fn(a) { a }; id(if (true) { return 7; }); 99', env=env) == Integer(7)

    def test_nothing_bound_by_interrupted_let(self):
        env = Environment()
        run('let x = if (true) { return 1; };', env=env)
        assert env.get('x') is None


class TestStringsAndCollections:
    """Test strings, arrays and hashes"""

    def test_string_concatenation(self):
        assert run('"Hello" + " " + "World!"') == String('Hello World!')

    def test_string_comparison(self):
        assert run('"a" == "a"') is TRUE
        assert run('"a" != "a"') is FALSE

    def test_array(self):
        result = run('[1, 2 * 2, 3 + 3]')
        assert isinstance(result, Array)
        assert result.elements == [Integer(1), Integer(4), Integer(6)]

    @pytest.mark.parametrize('source,expected', [
        ('[1, 2, 3][0]', Integer(1)),
        ('[1, 2, 3][2]', Integer(3)),
        ('let i = 0; [1][i];', Integer(1)),
        ('let myArray = [1, 2, 3]; myArray[0] + myArray[1] + myArray[2];', Integer(6)),
        ('[1, 2, 3][3]', NULL),
        ('[1, 2, 3][-1]', NULL),
    ])
    def test_array_index(self, source, expected):
        assert run(source) == expected

    def test_hash(self):
        result = run('let two = "two"; {"one": 10 - 9, two: 1 + 1, 4: 4, true: 5}')
        assert isinstance(result, Hash)
        values = {pair.key.inspect(): pair.value for pair in result.pairs.values()}
        assert values == {'one': Integer(1), 'two': Integer(2), '4': Integer(4), 'true': Integer(5)}

    @pytest.mark.parametrize('source,expected', [
        ('{"foo": 5}["foo"]', Integer(5)),
        ('{"foo": 5}["bar"]', NULL),
        ('let key = "foo"; {"foo": 5}[key]', Integer(5)),
        ('{}["foo"]', NULL),
        ('{5: 5}[5]', Integer(5)),
        ('{true: 5}[true]', Integer(5)),
    ])
    def test_hash_index(self, source, expected):
        assert run(source) == expected

    def test_unusable_hash_key(self):
        assert run('{"name": "Monkey"}[fn(x) { x }]') == Error('unusable as hash key: FUNCTION')
        assert run('{[1]: 2}') == Error('unusable as hash key: ARRAY')

    def test_index_not_supported(self):
        assert run('1[0]') == Error('index operator not supported: INTEGER')


class TestBuiltins:
    """Test builtin functions"""

    @pytest.mark.parametrize('source,expected', [
        ('len("")', Integer(0)),
        ('len("four")', Integer(4)),
        ('len([1, 2, 3])', Integer(3)),
        ('len(1)', Error('argument to `len` not supported, got INTEGER')),
        ('len("one", "two")', Error('wrong number of arguments: want=1, got=2')),
        ('first([1, 2, 3])', Integer(1)),
        ('first([])', NULL),
        ('last([1, 2, 3])', Integer(3)),
        ('rest([1])', Array([])),
        ('rest([])', NULL),
        ('first(1)', Error('argument to `first` must be ARRAY, got INTEGER')),
    ])
    def test_builtins(self, source, expected):
        result = run(source)
        if isinstance(expected, Array):
            assert isinstance(result, Array) and result.elements == expected.elements
        else:
            assert result == expected

    def test_push_copies(self):
        env = Environment()
        result = run('let a = [1]; let b = push(a, 2); len(a) * 10 + len(b)', env=env)
        assert result == Integer(12)

    def test_puts(self):
        output = io.StringIO()
        result = run('puts("hello", 1 + 1)', evaluator=Evaluator(output=output))
        assert result is NULL
        assert output.getvalue() == 'hello\n2\n'

    def test_user_binding_shadows_builtin(self):
        assert run('let len = fn(x) { 42 }; len("a")') == Integer(42)


class TestErrors:
    """Runtime errors short-circuit evaluation"""

    @pytest.mark.parametrize('source,message', [
        ('5 + true;', 'type mismatch: INTEGER + BOOLEAN'),
        ('5 + true; 5;', 'type mismatch: INTEGER + BOOLEAN'),
        ('-true', 'unknown operator: -BOOLEAN'),
        ('true + false;', 'unknown operator: BOOLEAN + BOOLEAN'),
        ('5; true + false; 5', 'unknown operator: BOOLEAN + BOOLEAN'),
        ('if (10 > 1) { true + false; }', 'unknown operator: BOOLEAN + BOOLEAN'),
        ('if (10 > 1) { if (10 > 1) { return true + false; } return 1; }',
         'unknown operator: BOOLEAN + BOOLEAN'),
        ('"Hello" - "World"', 'unknown operator: STRING - STRING'),
        ('let x = y + 1; x', 'identifier not found: y'),
        ('[1, foo, 3]', 'identifier not found: foo'),
        ('fn(x) { x }(nope)', 'identifier not found: nope'),
    ])
    def test_error_propagation(self, source, message):
        assert run(source) == Error(message)

    def test_failed_let_binds_nothing(self):
        env = Environment()
        run('let x = 1 + true;', env=env)
        assert env.get('x') is None

    def test_unknown_node(self):
        with pytest.raises(MonkeyError) as exc_info:
            Evaluator().evaluate(object(), Environment())
        assert exc_info.value.code == E_INVALID_NODE

    def test_module_level_evaluate(self):
        program, __ = parse('1 + 2')
        assert evaluate(program, Environment()) == Integer(3)
