import argparse
import asyncio
import getpass
from pathlib import Path

from doctranslator.config.settings import Settings
from doctranslator.documents.models import Document
from doctranslator.extraction.models import UploadedFile
from doctranslator.logging.logger import Log
from doctranslator.workspace import Workspace, build_workspace


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doctranslator",
        description="Translate documents and images through the document service.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    signin = sub.add_parser(
        "signin",
        help="Sign in and store the session",
        description=(
            "Sign in and store the session. The failed-attempt lockout is "
            "counted per process, so separate signin invocations never "
            "trigger it; the backend's own limits still apply."
        ),
    )
    signin.add_argument("email")
    signin.add_argument("--remember", action="store_true", help="Remember the email")

    signup = sub.add_parser("signup", help="Create an account")
    signup.add_argument("email")
    signup.add_argument("username")

    resend = sub.add_parser("resend", help="Resend the verification email")
    resend.add_argument("email")

    sub.add_parser("signout", help="Forget the stored session")
    sub.add_parser("whoami", help="Show the signed-in user and payment status")

    listing = sub.add_parser("list", help="List stored documents")
    listing.add_argument(
        "--pages", type=_positive_int, default=1, help="Number of pages to load"
    )
    listing.add_argument("--page-size", type=_positive_int, default=None)

    show = sub.add_parser("show", help="Print a stored document")
    show.add_argument("document_id")
    show.add_argument("--original", action="store_true", help="Print the original text")

    delete = sub.add_parser("delete", help="Delete a stored document")
    delete.add_argument("document_id")

    upload = sub.add_parser("upload", help="Extract, translate and store a file")
    upload.add_argument("path", type=Path)
    upload.add_argument("--source", default=None, help="Source language code")
    upload.add_argument("--target", default=None, help="Target language code")
    upload.add_argument("--mime-type", default=None)
    return parser


def _print_document_line(document: Document) -> None:
    print(
        f"{document.id}  {document.upload_date:%Y-%m-%d %H:%M}  "
        f"{document.size:>8}  {document.name}"
    )


async def _run(args: argparse.Namespace, workspace: Workspace) -> int:
    command = args.command

    if command == "signout":
        snapshot = workspace.sign_out()
        if snapshot.error_kind is not None:
            print(f"Error: {snapshot.message}")
            return 1
        print("Signed out.")
        return 0

    if command == "signin":
        password = getpass.getpass("Password: ")
        snapshot = await workspace.sign_in(args.email, password, args.remember)
        print(snapshot.message or snapshot.status.value)
        return 0 if snapshot.is_authenticated else 1

    if command == "signup":
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        snapshot = await workspace.auth.submit_sign_up(
            args.email, password, confirm, args.username
        )
        print(snapshot.message or snapshot.status.value)
        return 0 if snapshot.verification_pending else 1

    if command == "resend":
        snapshot = await workspace.auth.resend_verification(args.email)
        print(snapshot.message or "")
        return 1 if snapshot.error_kind else 0

    snapshot = await workspace.start()
    if not snapshot.is_authenticated:
        print("Not signed in. Run: doctranslator signin EMAIL")
        return 1

    if command == "whoami":
        user = snapshot.user or {}
        print(f"User: {user.get('email') or user.get('username') or '?'}")
        status = workspace.paywall.status
        if status is not None:
            print(f"Paid: {'yes' if status.has_paid else 'no'}")
            print(f"Remaining requests: {status.remaining_requests}")
        return 0

    if command == "list":
        state = workspace.documents.state
        if args.page_size:
            state = await workspace.documents.set_page_size(args.page_size)
        for _ in range(1, args.pages):
            if not state.has_more:
                break
            state = await workspace.documents.load_more()
        if state.connection_error:
            print(f"Error: {state.connection_error}")
            return 1
        for document in state.items:
            _print_document_line(document)
        print(f"Showing {len(state.items)} of {state.total} documents")
        return 0

    if command == "show":
        document, analysis = await workspace.preview(args.document_id)
        if document is None:
            print(f"Could not load document {args.document_id}")
            return 1
        text = document.original_text if args.original else document.translated_text
        print(text or "")
        if analysis is not None:
            print(f"\n[{analysis.document_type or 'document'}] {analysis.summary}")
        return 0

    if command == "delete":
        state = workspace.documents.state
        while state.has_more and all(d.id != args.document_id for d in state.items):
            state = await workspace.documents.load_more()
        state = await workspace.documents.delete(args.document_id)
        if state.connection_error:
            print(f"Error: {state.connection_error}")
            return 1
        print(f"Deleted {args.document_id}")
        return 0

    if command == "upload":
        source, target = workspace.orchestrator.languages
        workspace.orchestrator.set_languages(args.source or source, args.target or target)
        file = UploadedFile.from_path(args.path, mime_type=args.mime_type)
        document = await workspace.upload(file)
        if document is None:
            print(f"Error: {workspace.notice}")
            return 1
        print(f"Saved as {document.id}\n")
        print(document.translated_text or "")
        return 0

    raise ValueError(f"Unknown command {command}")


async def _main_async(args: argparse.Namespace, settings: Settings) -> int:
    workspace = build_workspace(settings)
    try:
        return await _run(args, workspace)
    finally:
        await workspace.aclose()


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse args -> configure logging -> run one command."""
    args = _build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level, settings.log_file)
    return asyncio.run(_main_async(args, settings))


if __name__ == "__main__":
    raise SystemExit(main())
