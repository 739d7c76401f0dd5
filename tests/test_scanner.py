from treelox.errors import ErrorReporter
from treelox.scanner import Scanner, scan
from treelox.tokens import TokenType as T


def kinds(tokens):
    return [t.kind for t in tokens]


def test_punctuation_and_operators():
    tokens = scan('(){};,.-+*/ ! != = == < <= > >=')
    assert kinds(tokens) == [
        T.LEFT_PAREN, T.RIGHT_PAREN, T.LEFT_BRACE, T.RIGHT_BRACE, T.SEMICOLON,
        T.COMMA, T.DOT, T.MINUS, T.PLUS, T.STAR, T.SLASH,
        T.BANG, T.BANG_EQUAL, T.EQUAL, T.EQUAL_EQUAL,
        T.LESS, T.LESS_EQUAL, T.GREATER, T.GREATER_EQUAL, T.EOF,
    ]


def test_two_char_operators_without_spaces():
    assert kinds(scan('a!=b==c<=d')) == [
        T.IDENTIFIER, T.BANG_EQUAL, T.IDENTIFIER, T.EQUAL_EQUAL,
        T.IDENTIFIER, T.LESS_EQUAL, T.IDENTIFIER, T.EOF,
    ]


def test_number_literals():
    tokens = scan('123 45.67 0.5')
    assert [t.literal for t in tokens[:-1]] == [123.0, 45.67, 0.5]
    assert all(isinstance(t.literal, float) for t in tokens[:-1])
    assert tokens[1].lexeme == '45.67'


def test_trailing_dot_is_not_part_of_number():
    tokens = scan('12.')
    assert kinds(tokens) == [T.NUMBER, T.DOT, T.EOF]
    assert tokens[0].literal == 12.0


def test_string_literal_keeps_contents_without_quotes():
    tokens = scan('"hi there"')
    assert tokens[0].kind == T.STRING
    assert tokens[0].lexeme == '"hi there"'
    assert tokens[0].literal == 'hi there'


def test_strings_have_no_escape_processing():
    tokens = scan(r'"a\nb"')
    assert tokens[0].literal == 'a\\nb'


def test_multiline_string_advances_line_counter():
    tokens = scan('"one\ntwo" x')
    assert tokens[0].literal == 'one\ntwo'
    assert tokens[0].line == 1
    assert tokens[1].lexeme == 'x'
    assert tokens[1].line == 2


def test_keywords_and_identifiers():
    tokens = scan('var variable or orchid nil _nil while2 print')
    assert kinds(tokens) == [
        T.VAR, T.IDENTIFIER, T.OR, T.IDENTIFIER, T.NIL, T.IDENTIFIER,
        T.IDENTIFIER, T.PRINT, T.EOF,
    ]


def test_comments_are_skipped_and_lines_counted():
    tokens = scan('// a comment\nprint 1; // trailing\n\nx')
    assert kinds(tokens) == [T.PRINT, T.NUMBER, T.SEMICOLON, T.IDENTIFIER, T.EOF]
    assert tokens[0].line == 2
    assert tokens[3].line == 4


def test_slash_is_division_when_not_a_comment():
    assert kinds(scan('4 / 2')) == [T.NUMBER, T.SLASH, T.NUMBER, T.EOF]


def test_empty_source_is_just_eof():
    tokens = scan('')
    assert len(tokens) == 1
    assert tokens[0].kind == T.EOF
    assert tokens[0].line == 1


def test_eof_is_on_last_line():
    assert scan('print 1;\n\n')[-1].line == 3


def test_invalid_character_is_reported_and_scanning_continues():
    scanner = Scanner('print 1 @ 2;')
    tokens = scanner.scan_tokens()
    assert kinds(tokens) == [T.PRINT, T.NUMBER, T.NUMBER, T.SEMICOLON, T.EOF]
    assert len(scanner.errors) == 1
    assert scanner.errors[0].message == "Unexpected character '@'."
    assert scanner.errors[0].line == 1


def test_each_invalid_character_gets_its_own_error_and_line():
    scanner = Scanner('@\nvar #x;\nprint')
    tokens = scanner.scan_tokens()
    assert [e.line for e in scanner.errors] == [1, 2]
    assert kinds(tokens) == [T.VAR, T.IDENTIFIER, T.SEMICOLON, T.PRINT, T.EOF]
    assert [t.line for t in tokens] == [2, 2, 2, 3, 3]


def test_unterminated_string():
    scanner = Scanner('print "abc\nmore')
    tokens = scanner.scan_tokens()
    assert kinds(tokens) == [T.PRINT, T.EOF]
    assert len(scanner.errors) == 1
    assert scanner.errors[0].message == 'Unterminated string.'
    assert scanner.errors[0].line == 1


def test_errors_go_to_the_reporter(capsys):
    reporter = ErrorReporter(color=False)
    scan('1 $', reporter)
    assert reporter.had_error
    assert not reporter.had_runtime_error
    assert capsys.readouterr().err.strip() == "Scan error: [line 1] Unexpected character '$'."
