from treelox.interpreter import parse_program, Interpreter


def test_program_3_while_counter(example_source, capsys):
    ast = parse_program(example_source('program_3.lox'))
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out.split('\n') == ['0', '1', '2']
