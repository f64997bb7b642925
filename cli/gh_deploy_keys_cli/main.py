"""gh-deploy-keys command definitions"""

import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gh_deploy_keys import (
    DeployKeyClient,
    DeployKeyError,
    build_session,
    generate_ssh_keypair,
    rotate_deploy_key,
)
from gh_deploy_keys_common import ConfigError, ConfigLoader, Credentials, DeployKey


console = Console()


def _make_client(options: dict) -> DeployKeyClient:
    """Build a client from command line options layered over the config file"""
    loader = ConfigLoader()
    if options["config_path"]:
        config = loader.load(options["config_path"])
    else:
        config = loader.load_from_dict({"version": "0.1"})

    owner = options["owner"] or config.owner
    repo = options["repo"] or config.repo
    username = options["username"] or config.username
    password = options["password"] or config.password()

    missing = [
        name for name, value in [
            ("owner", owner),
            ("repo", repo),
            ("username", username),
            ("password", password),
        ]
        if not value
    ]
    if missing:
        raise ConfigError(f"Missing required settings: {', '.join(missing)}")

    session = build_session(timeout=options["timeout"] or config.timeout)
    return DeployKeyClient(
        session,
        owner,
        Credentials(username=username, password=password),
        repo,
        api_url=options["api_url"] or config.api_url
    )


def _print_key(key: DeployKey):
    table = Table(title=f"Deploy key {key.title}")
    table.add_column("ID")
    table.add_column("TITLE")
    table.add_column("READ ONLY")
    table.add_column("VERIFIED")
    table.add_column("CREATED")
    table.add_row(
        str(key.id),
        key.title,
        "yes" if key.read_only else "no",
        "yes" if key.verified else "no",
        key.created_at or "N/A"
    )
    console.print(table)


def _fail(error: Exception):
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    sys.exit(1)


def _stage_key_file(path: Path, content: str, mode: int) -> Path:
    """Write content to a hidden sibling of path, created with the given mode"""
    tmp_path = path.with_name(f".{path.name}.tmp")
    tmp_path.unlink(missing_ok=True)
    fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
    with os.fdopen(fd, "w") as f:
        f.write(content)
    # the umask may have cleared bits of mode
    os.chmod(tmp_path, mode)
    return tmp_path


@click.group()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False),
              envvar='GH_DEPLOY_KEYS_CONFIG', help='YAML config file')
@click.option('--owner', help='Repository owner (user or organization)')
@click.option('--repo', help='Repository name')
@click.option('--username', help='GitHub username for basic auth')
@click.option('--password', envvar='GITHUB_PASSWORD',
              help='Password or token (default: $GITHUB_PASSWORD)')
@click.option('--api-url', help='GitHub API base URL')
@click.option('--timeout', type=click.FloatRange(min=0, min_open=True),
              help='Request timeout in seconds')
@click.option('--verbose', '-v', is_flag=True, help='Log API calls')
@click.pass_context
def cli(ctx, config_path, owner, repo, username, password, api_url, timeout, verbose):
    """gh-deploy-keys - manage GitHub repository deploy keys"""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    )
    ctx.obj = {
        "config_path": config_path,
        "owner": owner,
        "repo": repo,
        "username": username,
        "password": password,
        "api_url": api_url,
        "timeout": timeout,
    }


@cli.command()
@click.argument('title')
@click.pass_obj
def find(options, title):
    """Show the deploy key with the given title"""
    try:
        client = _make_client(options)
        key = client.find(title)
    except (ConfigError, DeployKeyError) as e:
        _fail(e)

    if not key.exists:
        console.print(f"[yellow]No deploy key titled '{escape(title)}'[/yellow]")
        return

    _print_key(key)


@cli.command()
@click.argument('key_id', type=int)
@click.pass_obj
def delete(options, key_id):
    """Delete a deploy key by id"""
    try:
        client = _make_client(options)
        client.delete(key_id)
    except (ConfigError, DeployKeyError) as e:
        _fail(e)

    console.print(f"[green]Deleted deploy key {key_id}[/green]")


@cli.command()
@click.argument('title')
@click.option('--key', 'key_text', help='Public key material')
@click.option('--key-file', type=click.Path(exists=True, dir_okay=False),
              help='Read the public key from a file (e.g. id_ed25519.pub)')
@click.option('--read-write', is_flag=True, help='Grant write access (default is read-only)')
@click.pass_obj
def create(options, title, key_text, key_file, read_write):
    """Add a deploy key

    Examples:
        gh-deploy-keys create ci --key-file ~/.ssh/ci.pub
        gh-deploy-keys create release --key "ssh-ed25519 AAAA..." --read-write
    """
    if (key_text is None) == (key_file is None):
        raise click.UsageError("Provide exactly one of --key or --key-file")

    if key_file:
        key_text = Path(key_file).read_text().strip()

    try:
        client = _make_client(options)
        key = client.create(title, key_text, read_only=not read_write)
    except (ConfigError, DeployKeyError) as e:
        _fail(e)

    console.print(f"[green]✓ Created deploy key {key.id}[/green]")
    _print_key(key)


@cli.command()
@click.argument('title')
@click.option('--private-key-out', required=True, type=click.Path(dir_okay=False),
              help='Where to write the new private key')
@click.option('--read-write', is_flag=True, help='Grant write access (default is read-only)')
@click.pass_obj
def rotate(options, title, private_key_out, read_write):
    """Replace the deploy key TITLE with a freshly generated keypair

    The private key is written to --private-key-out (mode 0600) and the
    public key next to it with a .pub suffix. Existing files at those
    paths are only replaced once GitHub has accepted the new key.
    """
    try:
        client = _make_client(options)
    except ConfigError as e:
        _fail(e)

    private_key, public_key = generate_ssh_keypair(comment=title)

    private_path = Path(private_key_out)
    public_path = Path(f"{private_path}.pub")
    staged = [
        (_stage_key_file(private_path, private_key, 0o600), private_path),
        (_stage_key_file(public_path, public_key + "\n", 0o644), public_path),
    ]

    try:
        key = rotate_deploy_key(client, title, public_key, read_only=not read_write)
    except DeployKeyError as e:
        for tmp_path, _ in staged:
            tmp_path.unlink(missing_ok=True)
        _fail(e)

    for tmp_path, final_path in staged:
        os.replace(tmp_path, final_path)

    console.print(f"  [dim]Wrote new keypair to {escape(str(private_path))}[/dim]")
    console.print(f"[green]✓ Rotated deploy key '{escape(title)}' (new id {key.id})[/green]")


if __name__ == "__main__":
    cli()
