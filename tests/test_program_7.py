from treelox.interpreter import parse_program, Interpreter


def test_program_7_truthiness(example_source, capsys):
    ast = parse_program(example_source('program_7.lox'))
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['big', 'zero is truthy', 'empty string is truthy', 'negated']
