from treelox.errors import ErrorReporter, ParseError
from treelox.interpreter import parse_program, Interpreter


def test_program_5_parse_recovery(example_source, capsys):
    reporter = ErrorReporter(color=False)
    ast = parse_program(example_source('program_5.lox'), reporter)
    interp = Interpreter(reporter=reporter)
    interp.run(ast)
    captured = capsys.readouterr()
    # Both broken declarations are dropped; the prints around them survive
    assert captured.out.strip().split('\n') == ['1', '2']
    assert all(isinstance(e, ParseError) for e in reporter.errors)
    assert [e.message for e in reporter.errors] == ['Expect variable name.', 'Expect expression.']
    assert captured.err.strip().split('\n') == [
        "Parse error: [line 1] Error at ';': Expect variable name.",
        "Parse error: [line 3] Error at ';': Expect expression.",
    ]
