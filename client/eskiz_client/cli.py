import argparse
import json
import os
import sys

from .client import DEFAULT_BASE_URL, login
from .config import DEFAULT_SENDER, EskizConfig, get_default_config_dir
from .errors import EskizError
from .logging_config import get_logger, setup_logging
from .models import SMS


def write_file(path: str, data: bytes, mode: int = 0o600) -> None:
    with open(path, 'wb') as f:
        f.write(data)
    try:
        os.chmod(path, mode)
    except OSError:
        # Ignore chmod issues on non-POSIX
        pass


def _login(args: argparse.Namespace):
    """Load config, set up logging and return (config, client)"""
    config = EskizConfig(args.config)
    setup_logging(log_level=config.log_level or ("DEBUG" if getattr(args, "verbose", False) else "WARNING"),
                  log_file=config.log_file)
    try:
        client = login(config.credentials(), base_url=config.base_url,
                       logger=get_logger("eskiz_client.cli"))
    except EskizError as e:
        if e.client is not None:
            e.client.close()
        raise
    return config, client


def _print_response(response: dict) -> None:
    print(json.dumps(response, indent=2, ensure_ascii=False))


def cmd_send_sms(args: argparse.Namespace) -> int:
    """Send an SMS message"""
    try:
        config, client = _login(args)
        sms = SMS(
            mobile_phone=args.to,
            message=args.message,
            sender=args.sender or config.sender,
            callback_url=args.callback_url or config.callback_url,
        )
        with client:
            response = client.send(sms)

        if args.verbose:
            _print_response(response)
        else:
            print(f"SMS sent successfully! Message ID: {response.get('id', 'N/A')}")
        return 0
    except (EskizError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_limit(args: argparse.Namespace) -> int:
    """Print the user's SMS limit"""
    try:
        _, client = _login(args)
        with client:
            _print_response(client.get_user_limit())
        return 0
    except (EskizError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_profile(args: argparse.Namespace) -> int:
    """Print the user's profile"""
    try:
        _, client = _login(args)
        with client:
            _print_response(client.get_profile())
        return 0
    except (EskizError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_test_connection(args: argparse.Namespace) -> int:
    """Test credentials by logging in"""
    try:
        _, client = _login(args)
        with client:
            print(f"Connection successful! {client.message}")
        return 0
    except (EskizError, OSError, ValueError) as e:
        print(f"Connection failed: {e}", file=sys.stderr)
        return 1


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize Eskiz client - creates config directory and config file"""
    config_dir = args.config_dir or get_default_config_dir()
    config_path = os.path.join(config_dir, "config.json")

    print(f"Initializing Eskiz client in: {config_dir}")

    try:
        os.makedirs(config_dir, exist_ok=True)
    except OSError as e:
        print(f"Failed to create config directory: {e}", file=sys.stderr)
        return 1

    if os.path.exists(config_path) and not args.force:
        print("Files already exist: config.json")
        print("Use --force to overwrite existing files")
        return 1

    config_data = {
        "email": args.email,
        "password": args.password,
        "base_url": args.base_url or DEFAULT_BASE_URL,
        "sender": args.sender or DEFAULT_SENDER,
        "callback_url": args.callback_url,
    }
    # Remove None values
    config_data = {k: v for k, v in config_data.items() if v is not None}

    try:
        write_file(config_path, json.dumps(config_data, indent=2).encode("utf-8"), 0o600)
    except OSError as e:
        print(f"Failed to create config file: {e}", file=sys.stderr)
        return 1

    print(f"Created config file: {config_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="eskiz-cli", description="Eskiz.uz SMS gateway client utilities")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="Create a config file", description="Create the configuration directory and a config file holding the account credentials.")
    p_init.add_argument("--config-dir", help="Config directory (default: XDG_CONFIG_HOME/eskiz_client or ~/.config/eskiz_client)")
    p_init.add_argument("--email", required=True, help="Eskiz account email")
    p_init.add_argument("--password", required=True, help="Eskiz account password")
    p_init.add_argument("--base-url", help=f"API base URL (default: {DEFAULT_BASE_URL})")
    p_init.add_argument("--sender", help=f"Default sender name (default: {DEFAULT_SENDER})")
    p_init.add_argument("--callback-url", help="Default delivery report callback URL")
    p_init.add_argument("--force", action="store_true", help="Overwrite existing files")
    p_init.set_defaults(func=cmd_init)

    p_send = sub.add_parser("send", help="Send an SMS message", description="Send an SMS message to a phone number.")
    p_send.add_argument("message", help="Message to send")
    p_send.add_argument("--to", required=True, help="Recipient phone number, e.g. 998771234567")
    p_send.add_argument("--sender", help="Sender name (overrides config)")
    p_send.add_argument("--callback-url", help="Delivery report callback URL (overrides config)")
    p_send.add_argument("--config", default=None, help="Config file path (default: auto-detect from config directory)")
    p_send.add_argument("--verbose", "-v", action="store_true", help="Verbose output (default: False)")
    p_send.set_defaults(func=cmd_send_sms)

    p_limit = sub.add_parser("limit", help="Show SMS limit")
    p_limit.add_argument("--config", default=None, help="Config file path (default: auto-detect from config directory)")
    p_limit.set_defaults(func=cmd_limit)

    p_profile = sub.add_parser("profile", help="Show user profile")
    p_profile.add_argument("--config", default=None, help="Config file path (default: auto-detect from config directory)")
    p_profile.set_defaults(func=cmd_profile)

    p_test = sub.add_parser("test", help="Test login to the Eskiz API")
    p_test.add_argument("--config", default=None, help="Config file path (default: auto-detect from config directory)")
    p_test.set_defaults(func=cmd_test_connection)

    return p


def main(argv=None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
