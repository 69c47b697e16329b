import re
import sys
from pathlib import Path

import click

from config_manager import ConfigManager
from core.session_builder import SessionBuilder
from utils.layout_utils import ListMode

ANSWER_TYPES = {
    'str': str,
    'int': int,
    'float': float,
    'bool': bool,
    'path': Path,
    'words': list,
}


@click.group()
@click.option('-c', '--conf', default=None, help='Path to a custom configuration file')
@click.option('-w', '--wrap-at', type=int, default=None, help='Wrap output at this many columns')
@click.option('-p', '--page-at', type=int, default=None, help='Pause output every this many lines')
@click.option('--no-color', is_flag=True, default=False, help='Disable ANSI colors')
@click.pass_context
def cli(ctx, conf, wrap_at, page_at, no_color):
    """
    Interactive console prompts: ask, agree, choose and lay out lists.
    """
    ctx.ensure_object(dict)
    try:
        config_manager = ConfigManager(conf)
    except FileNotFoundError as e:
        raise click.ClickException(str(e))
    options = {'wrap_at': wrap_at, 'page_at': page_at}
    if no_color:
        options['colors'] = False
    ctx.obj['BUILDER'] = SessionBuilder(config_manager)
    ctx.obj['OPTIONS'] = options


def _session(ctx):
    stdin = sys.stdin
    stdout = sys.stdout
    return ctx.obj['BUILDER'].build(stdin, stdout, **ctx.obj['OPTIONS'])


def _run(ctx, func):
    session = _session(ctx)
    try:
        return func(session)
    except EOFError:
        session.utils.output.error("Input ended before a valid answer was given.")
        ctx.exit(1)


@cli.command()
@click.argument('text', nargs=-1, required=True)
@click.pass_context
def say(ctx, text):
    """Print TEXT (template tags, wrapping and paging apply)."""
    _run(ctx, lambda s: s.say(' '.join(text)))


@cli.command()
@click.argument('question')
@click.option('-t', '--type', 'answer_type', type=click.Choice(sorted(ANSWER_TYPES)), default='str', help='Answer type')
@click.option('-v', '--validate', default=None, help='Regular expression the answer must match')
@click.option('-d', '--default', default=None, help='Answer used when the reply is empty')
@click.option('--above', type=float, default=None, help='Numeric answers must be greater than this')
@click.option('--below', type=float, default=None, help='Numeric answers must be less than this')
@click.option('--confirm', is_flag=True, default=False, help='Ask "Are you sure?" before accepting')
@click.option('--secret', is_flag=True, default=False, help='Mask the reply with "*"')
@click.pass_context
def ask(ctx, question, answer_type, validate, default, above, below, confirm, secret):
    """Ask QUESTION and print the converted answer."""
    def configure(q):
        if validate:
            q.validate = re.compile(validate)
        q.default = default
        q.above = above
        q.below = below
        q.confirm = confirm or None
        if secret:
            q.echo = '*'

    answer = _run(ctx, lambda s: s.ask(question + '  ', ANSWER_TYPES[answer_type], configure))
    click.echo(repr(answer))


@cli.command()
@click.argument('question')
@click.option('--character', is_flag=True, default=False, help='Answer with a single key press')
@click.pass_context
def agree(ctx, question, character):
    """Ask a yes/no QUESTION; exits 0 for yes and 1 for no."""
    result = _run(ctx, lambda s: s.agree(question + '  ', True if character else None))
    ctx.exit(0 if result else 1)


@cli.command()
@click.argument('items', nargs=-1, required=True)
@click.option('--header', default=None, help='Header shown above the menu')
@click.option('--prompt', default=None, help='Prompt shown after the menu')
@click.option('--flow', type=click.Choice([m.value for m in ListMode]), default=ListMode.ROWS.value, help='Menu layout flow')
@click.option('--index', type=click.Choice(['number', 'letter', 'none']), default='number', help='Index style')
@click.option('--shell', is_flag=True, default=False, help='Accept "command arguments" replies')
@click.pass_context
def choose(ctx, items, header, prompt, flow, index, shell):
    """Show a menu of ITEMS and print the selection."""
    def configure(menu):
        menu.header = header
        if prompt:
            menu.prompt = prompt + '  '
        menu.flow = flow
        menu.index = index
        menu.shell = shell
        menu.readline = shell

    result = _run(ctx, lambda s: s.choose(*items, configure=configure))
    if shell:
        name, details = result
        click.echo(f"{name}\t{details}")
    else:
        click.echo(result)


@cli.command(name='list')
@click.argument('items', nargs=-1)
@click.option('-m', '--mode', type=click.Choice([m.value for m in ListMode]), default=ListMode.ROWS.value, help='Layout mode')
@click.option('-o', '--option', default=None, help='Separator (inline) or column count (columns_*)')
@click.pass_context
def list_cmd(ctx, items, mode, option):
    """Lay out ITEMS."""
    if option is not None and mode in (ListMode.COLUMNS_ACROSS.value, ListMode.COLUMNS_DOWN.value):
        try:
            option = int(option)
        except ValueError:
            raise click.BadParameter('column count must be an integer', param_hint='--option')
    session = _session(ctx)
    click.echo(session.list(items, mode, option), nl=False)


if __name__ == '__main__':
    cli()
