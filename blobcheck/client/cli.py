# blobcheck/client/cli.py
"""
blobcheck-client: health check + upload vanaf de command line.

  blobcheck-client health
  blobcheck-client upload ./foto.png
  blobcheck-client fetch https://picsum.photos/200/300 --name sample-image.png
  blobcheck-client record --command "ffmpeg -f v4l2 -i /dev/video0 -t 5 -f webm pipe:1"
"""
import argparse
import sys
from typing import Optional, Sequence

from blobcheck.client.config import ClientSettings
from blobcheck.client.errors import UploadError
from blobcheck.client.harness import UploadHarness
from blobcheck.client.recorder import CommandCapture, Recorder
from blobcheck.client.state import Failed, Selecting, Succeeded, UploadState
from blobcheck.core.logging_config import setup_logging


def positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blobcheck-client", description="Blob upload debug tool")
    parser.add_argument("--server", help="Server URL (default: uit BLOBCHECK_SERVER_HOST/PORT)")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconden")
    parser.add_argument("--log-level", default="WARNING")

    sub = parser.add_subparsers(dest="command", required=True)

    p_health = sub.add_parser("health", help="GET /health")
    p_health.add_argument("--attempts", type=positive_int, default=1)
    p_health.add_argument("--interval", type=float, default=2.0)

    p_upload = sub.add_parser("upload", help="Upload een lokale file")
    p_upload.add_argument("path")
    p_upload.add_argument("--type", dest="mimetype")

    p_fetch = sub.add_parser("fetch", help="Haal een URL op als blob en upload die")
    p_fetch.add_argument("url")
    p_fetch.add_argument("--name", dest="filename")

    p_record = sub.add_parser("record", help="Neem op via een capture-commando en upload")
    p_record.add_argument("--command", dest="capture_command", required=True)
    p_record.add_argument("--type", dest="mimetype", default="video/webm")
    p_record.add_argument("--seconds", type=float)

    return parser


def render(state: UploadState) -> int:
    if isinstance(state, Succeeded):
        f = state.file
        print("✅ Upload Successful!")
        print(f"📁 Filename: {f.filename}")
        print(f"📏 Size: {f.size} bytes")
        print(f"🏷️ Type: {f.mimetype}")
        print(f"📅 Uploaded: {f.uploaded_at}")
        return 0
    if isinstance(state, Failed):
        print(f"❌ Upload Failed! [{state.category.value}]")
        print(state.message)
        return 1
    print(f"state: {state.name}")
    return 1


def _print_selected(state: UploadState) -> None:
    if isinstance(state, Selecting):
        print(f"📄 Selected: {state.blob.describe()}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    settings = ClientSettings()
    if args.timeout is not None:
        settings.TIMEOUT_SECONDS = args.timeout

    with UploadHarness(settings=settings, server_url=args.server) as harness:
        if args.command == "health":
            try:
                health = harness.poll_health(interval=args.interval, attempts=args.attempts)
            except UploadError as e:
                print(f"❌ Health Check Failed: {e.message}")
                print(f"Make sure the server is running at {harness.server_url}")
                return 1
            print(f"✅ Server Status: {health.status}")
            print(f"📅 Timestamp: {health.timestamp}")
            print(f"💬 Message: {health.message}")
            return 0

        if args.command == "record":
            capture = CommandCapture(args.capture_command, mimetype=args.mimetype)
            return render(Recorder(harness, capture).record(seconds=args.seconds))

        if args.command == "upload":
            state = harness.select_file(args.path, mimetype=args.mimetype)
        else:
            state = harness.select_url(args.url, filename=args.filename)
        if isinstance(state, Failed):
            return render(state)
        _print_selected(state)
        return render(harness.upload())


if __name__ == "__main__":
    sys.exit(main())
