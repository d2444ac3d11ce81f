from gettext import gettext as _
from pathlib import Path

COMMAND_DESCRIPTION = _("Train a dense network on an .npz file of inputs and targets")


def command(parser):
    parser.add_argument(
        "data",
        type=Path,
        help=_("Path to an .npz file with 'inputs' and 'targets' arrays"),
    )

    parser.add_argument(
        "--hidden",
        dest="hidden",
        type=int,
        nargs="+",
        default=[4],
        help=_("Hidden layer sizes"),
    )

    parser.add_argument(
        "-b",
        "--batch-size",
        dest="batch_size",
        type=int,
        default=None,
        help=_("Examples averaged per update"),
    )

    parser.add_argument(
        "-m",
        "--momentum",
        dest="momentum",
        type=float,
        default=None,
        help=_("Share of the previous update carried into the next one"),
    )

    parser.add_argument(
        "-a",
        "--accuracy",
        dest="accuracy",
        type=float,
        default=None,
        help=_("Divisor applied to each averaged gradient (inverse step size)"),
    )

    parser.add_argument(
        "--error-memory",
        dest="error_memory",
        type=int,
        default=None,
        help=_("Number of recent losses in the running mean error"),
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-n",
        "--blocks",
        dest="blocks",
        type=int,
        default=None,
        help=_("Run exactly this many blocks"),
    )
    group.add_argument(
        "-e",
        "--target-error",
        dest="target_error",
        type=float,
        default=None,
        help=_("Run until the mean error reaches this value (no iteration cap)"),
    )
    group.add_argument(
        "--passes",
        dest="passes",
        type=int,
        default=1,
        help=_("Number of passes over the dataset"),
    )

    parser.add_argument(
        "--seed",
        dest="seed",
        type=int,
        default=None,
        help=_("Seed for weight initialisation"),
    )

    parser.add_argument(
        "--progress",
        dest="progress",
        action="store_true",
        help=_("Show a progress bar"),
    )

    def handle(args):
        from .train import handle as train_handle

        train_handle(args)

    return handle
