"""
Main CLI entry point.
"""

import click
import logging

from nodehop import __version__


@click.group()
@click.version_option(version=__version__)
def main():
    """Nodehop: walk and restructure syntax trees node by node."""
    pass


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def _load(file, config_path, language, named):
    from nodehop.config import EditorConfig
    from nodehop.hosts import TreeSitterDocument, guess_language

    try:
        config = EditorConfig.from_file(config_path) if config_path else EditorConfig()
    except ValueError as e:
        raise click.ClickException(str(e))

    if language:
        config.language = language
    elif not config_path:
        config.language = guess_language(file) or config.language
    if named is not None:
        config.named_mode = named

    try:
        document = TreeSitterDocument.from_file(
            file,
            language=config.language,
            injections=config.injections,
        )
        document.root()
    except (ValueError, OSError) as e:
        raise click.ClickException(str(e))

    return config, document


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--row", "-r", default=0, type=int, help="Cursor row (zero-based)")
@click.option("--col", "-c", default=0, type=int, help="Cursor column (zero-based)")
@click.option("--keys", "-k", default="", help="Space separated keys to replay, e.g. \"h j J\"")
@click.option("--outer", is_flag=True, help="Start at the outermost node")
@click.option("--all", "all_nodes", is_flag=True, help="Visit unnamed nodes too")
@click.option("--language", "-l", help="Grammar name (default: guessed from extension)")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="TOML config file")
@click.option("--write", "-w", is_flag=True, help="Save buffer changes back to FILE")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def nav(file, row, col, keys, outer, all_nodes, language, config_path, write, verbose):
    """Enter node mode at a cursor position and replay keys."""
    from nodehop.core import Point
    from nodehop.editor import Editor

    _setup_logging(verbose)
    logger = logging.getLogger(__name__)

    config, document = _load(file, config_path, language, False if all_nodes else None)

    document.cursor = Point(row, col)
    editor = Editor(document, config)
    if not editor.enter(outermost=outer):
        raise click.ClickException(f"No syntax node at {row}:{col}")

    for key in keys.split():
        if not editor.on:
            logger.info(f"Node mode left before key {key!r}")
            break
        if not editor.press(key):
            logger.warning(f"Unbound key: {key}")

    click.echo(editor.status())
    selection = editor.selection()
    if selection is not None:
        node = editor.current_node()
        click.echo(f"{node.type} {selection.start.row}:{selection.start.col}-{selection.stop.row}:{selection.stop.col}")
        click.echo("\n".join(document.buffer.get_text(selection)))
    elif editor.last_selection is not None:
        anchor, cursor = editor.last_selection.anchor, editor.last_selection.cursor
        click.echo(f"selection {anchor.row}:{anchor.col}-{cursor.row}:{cursor.col}")
        click.echo("\n".join(document.buffer.get_text(editor.last_selection.position)))
    else:
        click.echo(f"cursor {document.cursor.row}:{document.cursor.col}")

    if write:
        document.save(file)
        logger.info(f"Wrote {file}")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--all", "all_nodes", is_flag=True, help="Show unnamed nodes too")
@click.option("--language", "-l", help="Grammar name (default: guessed from extension)")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="TOML config file")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def tree(file, all_nodes, language, config_path, verbose):
    """Print the syntax tree outline of FILE."""
    from nodehop.core import depth, walk_tree

    _setup_logging(verbose)

    _, document = _load(file, config_path, language, None)

    parsed = [document.host_tree, *document.injected_trees]
    for index, parsed_tree in enumerate(parsed):
        if index:
            click.echo(f"-- injected {parsed_tree.language} --")
        for node in walk_tree(parsed_tree.root(), named_only=not all_nodes):
            start_row, start_col, stop_row, stop_col = node.range
            indent = "  " * depth(node)
            click.echo(f"{indent}{node.type} [{start_row}:{start_col}-{stop_row}:{stop_col}]")


if __name__ == "__main__":
    main()
