"""The `rlm` command: stdin in, model reply out."""

import argparse
import json
import sys

from rapidllm import __version__
from rapidllm.config import load_settings
from rapidllm.errors import InputError, RapidLLMError
from rapidllm.logger import configure_logging, logger
from rapidllm.main import CompletionClient
from rapidllm.prompts import resolve_prompt

LICENSE = "GNU LGPLv3+"


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="rlm", description="Send standard input to an LLM and print its reply.")
    parser.add_argument("-m", "--model", default=None, help="Model identifier (default: RAPIDLLM_DEFAULT_MODEL)")
    parser.add_argument(
        "-p",
        "--prompt",
        "-s",
        "--system",
        dest="prompt",
        default=None,
        help="System prompt: a name under ~/.config/rapidllm/prompts, a file path, or literal text",
    )
    parser.add_argument(
        "-c",
        "--character-limit",
        "--character_limit",
        dest="character_limit",
        type=int,
        default=None,
        help="Maximum total characters sent to the model",
    )
    parser.add_argument("--raw-request", action="store_true", help="Print the request JSON to stderr before sending")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    parser.add_argument("--license", action="store_true", help="Print the license and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def read_user_message(stream=None) -> str:
    """Read the whole stream, dropping the single trailing newline left by shells and editors."""
    stream = stream if stream is not None else sys.stdin
    try:
        text = stream.read()
    except UnicodeDecodeError as exc:
        raise InputError(f"Could not read from stdin: {exc}") from exc

    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


def run(args: argparse.Namespace) -> str:
    """Resolve the prompt, call the model and return its reply."""
    settings = load_settings(character_limit=args.character_limit)

    client = CompletionClient.from_settings(settings)
    model = args.model or settings.default_model

    user = read_user_message()
    logger.debug(f"Read user message of size {len(user)}")

    prompt_arg = args.prompt.strip() if args.prompt is not None else None
    system = resolve_prompt(prompt_arg, settings.prompts_root)
    if system is not None:
        logger.debug(f"Read system message of size {len(system)}")

    request = client.build_request(model, user, system)
    if args.raw_request:
        print(json.dumps(request.to_payload(), indent=2, ensure_ascii=False), file=sys.stderr)

    return client.send(request)


def main(argv: list[str] | None = None) -> int:
    args = parse_arguments(argv)

    if args.license:
        print(LICENSE)
        return 0

    configure_logging(args.verbose)
    logger.debug("rlm started")

    try:
        reply = run(args)
    except RapidLLMError as exc:
        print(f"rlm: {exc.stage} error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    sys.stdout.write(reply)
    sys.stdout.flush()
    return 0


def entrypoint():
    sys.exit(main())


if __name__ == "__main__":
    entrypoint()
