#!/usr/bin/env python3
"""
Command line interface for signin_harvest
"""

import re
import asyncio
from typing import Iterable, List, Optional

import click

from . import create_client
from .archive import CookieArchive
from .config import ClientOptions, load_options
from .cookie_store import ALL, Cookie, CookieFilter, CookieStore
from .drivers import SeleniumDriver
from .exceptions import ConfigurationError, SigninHarvestError
from .utils import setup_logging, validate_url

OUTPUT_FORMATS = ['json', 'header', 'table']
TRI_STATE_CHOICES = ['true', 'false', ALL]

def _tri_state(value: str):
    if value == ALL:
        return ALL
    return value == 'true'

def render_cookies(cookies: Iterable[Cookie], output_format: str) -> str:
    """Render cookies as JSON map, Cookie header, or a plain table"""
    store = CookieStore(cookies)
    if output_format == 'json':
        return store.to_json()
    if output_format == 'header':
        return store.to_header()

    rows = [('NAME', 'DOMAIN', 'PATH', 'SECURE', 'HTTPONLY', 'EXPIRES')]
    for cookie in store.get_cookies() if store.has_cookies() else []:
        rows.append((
            cookie.name,
            cookie.domain,
            cookie.path,
            'yes' if cookie.secure else 'no',
            'yes' if cookie.http_only else 'no',
            'session' if cookie.expires is None else str(int(cookie.expires))
        ))
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    return '\n'.join(
        '  '.join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    )

def build_options(config_path: Optional[str], signin_url: Optional[str], site: Optional[str],
                  username_selector: Optional[str], password_selector: Optional[str],
                  submit_selector: Optional[str], debug: bool,
                  screenshot_dir: Optional[str]) -> ClientOptions:
    """Combine config file, preset and command line flags; later sources win"""
    options = load_options(config_path)

    if site:
        preset = ClientOptions.for_site(site, signin_url or options.signin_url)
        options = options.merge(
            signin_url=preset.signin_url,
            username=preset.username,
            password=preset.password,
            submit=preset.submit
        )
    elif signin_url:
        options = options.merge(signin_url=signin_url)

    changes = {
        name: value for name, value in (
            ('username', username_selector),
            ('password', password_selector),
            ('submit', submit_selector),
            ('screenshot_dir', screenshot_dir)
        ) if value
    }
    if debug:
        changes['debug'] = True
    options = options.merge(**changes)

    if not options.signin_url:
        raise ConfigurationError("A sign-in URL is required (argument, --config or SIGNIN_HARVEST_URL)")
    if not validate_url(options.signin_url):
        raise ConfigurationError(f"Invalid sign-in URL: {options.signin_url}")
    return options

async def _harvest(client, user: str, password: str, jump: bool) -> List[Cookie]:
    async with client:
        await client.signin(user, password, {'jump': jump})
        if not client.has_cookies():
            return []
        return client.get_cookies()

@click.group()
@click.option('--verbose', '-v',
              is_flag=True,
              help='Enable verbose logging')
def main(verbose: bool):
    """Sign in to websites in a real browser and harvest the session cookies."""
    setup_logging({'level': 'DEBUG' if verbose else 'WARNING'})

@main.command()
@click.argument('signin_url', required=False)
@click.option('--config', '-c',
              type=click.Path(exists=True, dir_okay=False),
              help='YAML configuration file with a signin section')
@click.option('--site',
              help='Predefined selector preset (github, wordpress, confluence, atlassian)')
@click.option('--username-selector', help='CSS selector of the username input')
@click.option('--password-selector', help='CSS selector of the password input')
@click.option('--submit-selector', help='CSS selector of the submit button')
@click.option('--user', envvar='SIGNIN_HARVEST_USER', prompt='Username',
              help='Username to sign in with')
@click.option('--password', envvar='SIGNIN_HARVEST_PASSWORD', prompt='Password', hide_input=True,
              help='Password to sign in with')
@click.option('--no-jump', is_flag=True,
              help='Do not wait for a navigation after submitting')
@click.option('--debug', is_flag=True,
              help='Show the browser window')
@click.option('--browser', type=click.Choice(['chrome', 'firefox']), default='chrome',
              show_default=True, help='Browser to drive')
@click.option('--format', 'output_format', type=click.Choice(OUTPUT_FORMATS), default='json',
              show_default=True, help='Output format')
@click.option('--archive-dir', type=click.Path(file_okay=False),
              help='Also save the cookies under this cache directory')
@click.option('--screenshot-dir', type=click.Path(file_okay=False),
              help='Save a screenshot here when sign-in fails')
def signin(signin_url, config, site, username_selector, password_selector, submit_selector,
           user, password, no_jump, debug, browser, output_format, archive_dir, screenshot_dir):
    """Sign in at SIGNIN_URL and print the harvested cookies."""
    try:
        options = build_options(config, signin_url, site, username_selector,
                                password_selector, submit_selector, debug, screenshot_dir)
    except SigninHarvestError as e:
        raise click.ClickException(str(e))

    errors = []
    client = create_client(options, driver=SeleniumDriver({'browser': browser}))
    client.on('error', errors.append)

    try:
        cookies = asyncio.run(_harvest(client, user, password, not no_jump))
    except SigninHarvestError as e:
        raise click.ClickException(str(e))

    if errors:
        raise click.ClickException(f"Sign-in failed: {errors[0]}")

    click.echo(render_cookies(cookies, output_format))

    if archive_dir:
        archive_file = CookieArchive(archive_dir).save(options.signin_url, cookies)
        click.echo(f"Saved {len(cookies)} cookies to {archive_file}", err=True)

@main.command()
@click.argument('site_url')
@click.option('--archive-dir', type=click.Path(file_okay=False), default='cache',
              show_default=True, help='Cache directory holding cookie archives')
@click.option('--domain', default='.', show_default=True, help='Regex the cookie domain must match')
@click.option('--path', default='.', show_default=True, help='Regex the cookie path must match')
@click.option('--expired', type=click.Choice(TRI_STATE_CHOICES), default=ALL, show_default=True)
@click.option('--secure', type=click.Choice(TRI_STATE_CHOICES), default=ALL, show_default=True)
@click.option('--http-only', type=click.Choice(TRI_STATE_CHOICES), default=ALL, show_default=True)
@click.option('--format', 'output_format', type=click.Choice(OUTPUT_FORMATS), default='table',
              show_default=True, help='Output format')
def cookies(site_url, archive_dir, domain, path, expired, secure, http_only, output_format):
    """Show archived cookies for SITE_URL."""
    stored = CookieArchive(archive_dir).load(site_url)
    if stored is None:
        raise click.ClickException(f"No archived cookies for {site_url}")

    try:
        cookie_filter = CookieFilter(
            domain=re.compile(domain),
            path=re.compile(path),
            expired=_tri_state(expired),
            secure=_tri_state(secure),
            http_only=_tri_state(http_only)
        )
    except re.error as e:
        raise click.ClickException(f"Invalid pattern: {e}")

    # An empty archive has nothing to filter
    matched = CookieStore(stored).get_cookies(cookie_filter) if stored else []
    click.echo(render_cookies(matched, output_format))

@main.command()
@click.option('--archive-dir', type=click.Path(file_okay=False), default='cache',
              show_default=True, help='Cache directory holding cookie archives')
def archives(archive_dir):
    """List archived cookie snapshots."""
    listing = CookieArchive(archive_dir).list_archives()
    if not listing:
        click.echo("No cookie archives found")
        return

    for domain, info in sorted(listing.items()):
        click.echo(f"{domain}: {info['cookie_count']} cookies, saved {info['saved_at']}")

if __name__ == '__main__':
    main()
