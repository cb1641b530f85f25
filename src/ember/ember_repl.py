import io
import logging
import traceback

from ember.ember_cli import __version__, configure_logging
from ember.ember_lexer import LexError, tokenize
from ember.ember_parser import ParseError, Parser, nesting_error
from ember.ember_render import Renderer


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def needs_more_input(src: str) -> bool:
    """True if `src` only fails because it ends inside an open construct."""
    try:
        Parser.from_source(src).parse_program()
    except ParseError as e:
        return e.at_eof
    except (LexError, RecursionError):
        return False
    return False


def render_source(src: str, fmt: str = "sexpr", show_tokens: bool = False) -> str:
    """Renders each top-level expression of `src` on its own line.

    Raises:
        ParseError: If `src` is not a complete program or nests too deeply.
        LexError: If `src` holds a character the lexer cannot classify.
    """
    if show_tokens:
        return "\n".join(f"{tok.kind}\t{tok.text}" for tok in tokenize(src))
    parser = Parser.from_source(src)
    try:
        program = parser.parse_program()
    except RecursionError:
        raise nesting_error(parser) from None
    return Renderer(fmt).render(list(program.children))


def start_repl(verbose: bool = False, fmt: str = "sexpr") -> None:
    print(f"Ember REPL v{__version__}. Type 'exit' or 'quit' to leave.")
    if verbose:
        configure_logging(verbose=True)
    show_tokens = False

    while True:
        try:
            src_lines: list[str] = []
            while True:
                prompt = ">>> " if not src_lines else "... "
                line = input(prompt)
                if line.strip() in ("exit", "quit") and not src_lines:
                    print("Exiting Ember REPL.")
                    return
                # A blank continuation line gives up on the open construct.
                if src_lines and not line.strip():
                    break
                src_lines.append(line)
                if not needs_more_input("\n".join(src_lines)):
                    break
            src = "\n".join(src_lines).strip()
            if not src:
                continue
            if src == "verbose-mode":
                verbose = not verbose
                logging.getLogger("ember").setLevel(
                    logging.DEBUG if verbose else logging.ERROR
                )
                if verbose:
                    configure_logging(verbose=True)
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            if src == "tokens":
                show_tokens = not show_tokens
                print(f"[mode] >>> Token mode {'ON' if show_tokens else 'OFF'}")
                continue

            try:
                output = render_source(src, fmt=fmt, show_tokens=show_tokens)
            except ParseError as e:
                print("[error] >>>")
                print(e)
                continue
            except LexError as e:
                print("[fatal] >>>")
                print(e)
                continue
            except Exception:
                print_traceback()
                continue

            if output:
                print(output)

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Ember REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
