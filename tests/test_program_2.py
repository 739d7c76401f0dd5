from treelox.interpreter import parse_program, Interpreter


def test_program_2_shadowing(example_source, capsys):
    ast = parse_program(example_source('program_2.lox'))
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    # The inner declaration shadows x only inside its block
    assert out.split('\n') == ['2', '1']
    assert interp.global_env.values == {'x': 1.0}
