"""
命令列進入點

提供 --content/--style/--model 時直接執行；缺少任一項則進入互動模式
"""

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from stylizer.app import ApplicationService
from stylizer.backends import BackendRegistry, load_builtin_backends
from stylizer.data_model import BatchConfig, ChannelLayout, TransferConfig
from stylizer.settings import AppSettings, get_settings, setup_logging


logger = logging.getLogger(__name__)


def build_parser(settings: AppSettings) -> argparse.ArgumentParser:
    """建立參數解析器（預設值取自設定）"""
    p = argparse.ArgumentParser(
        prog="stylizer",
        description=(
            "Arbitrary neural style transfer: run a two-input model "
            "(content + style) once and save the stylized image.\n"
            "Run without --content/--style/--model for interactive mode."
        ),
    )
    p.add_argument("--content", type=Path, help="Content image (or folder with --batch).")
    p.add_argument("--style", type=Path, help="Style image.")
    p.add_argument(
        "--model",
        type=Path,
        default=settings.model_path,
        help="Model file (.onnx for onnx, .pt for torchscript).",
    )
    p.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output image path (folder with --batch).",
    )
    p.add_argument(
        "--backend",
        default=settings.default_backend,
        help="Inference backend (see --list-backends).",
    )
    p.add_argument(
        "--device",
        default=settings.device,
        help="Compute device (auto/cuda/mps/cpu). Default: auto.",
    )
    p.add_argument(
        "--resolution",
        type=int,
        default=settings.resolution,
        help="Square working resolution the model expects.",
    )
    p.add_argument(
        "--layout",
        choices=[m.value for m in ChannelLayout],
        default=settings.channel_layout.value,
        help="Channel packing of input/output tensors.",
    )
    p.add_argument("--content-input", default=settings.content_input)
    p.add_argument("--style-input", default=settings.style_input)
    p.add_argument(
        "--batch",
        action="store_true",
        help="Treat --content as a folder and stylize every image in it.",
    )
    p.add_argument("--list-backends", action="store_true", help="List backends and exit.")
    p.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    return p


def _config_from_args(args: argparse.Namespace) -> TransferConfig | BatchConfig:
    common = {
        "style_path": args.style,
        "model_path": args.model,
        "backend_name": args.backend,
        "device": None if args.device == "auto" else args.device,
        "resolution": args.resolution,
        "content_input": args.content_input,
        "style_input": args.style_input,
        "layout": ChannelLayout(args.layout),
    }
    if args.batch:
        return BatchConfig(input_folder=args.content, output_folder=args.out, **common)
    return TransferConfig(content_path=args.content, output_path=args.out, **common)


def _print_backends() -> None:
    print("\n=== 已註冊的後端 ===\n")
    for i, backend in enumerate(BackendRegistry.list_backends(), 1):
        print(f"{i}. {backend.name}")
        print(f"   描述: {backend.description}")
        print(f"   可用設備: {', '.join(backend.devices)}")
        print()


def main(argv: Sequence[str] | None = None) -> int:
    """
    主程式

    Returns:
        退出碼 (0: 成功, 1: 失敗, 130: 中斷)
    """
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)
    setup_logging(args.log_level or settings.log_level)

    if args.list_backends:
        load_builtin_backends()
        _print_backends()
        return 0

    service = ApplicationService()

    if args.content is None or args.style is None or args.model is None:
        logger.debug("Missing content/style/model arguments, entering interactive mode")
        return service.run_interactive()

    try:
        config = _config_from_args(args)
    except ValueError:
        logger.exception("Invalid arguments")
        return 1

    return service.run(config)
