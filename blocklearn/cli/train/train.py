import logging
import os
from gettext import gettext as _

import numpy as np
from easydict import EasyDict as edict

from blocklearn.core.training import (
    ConfigurationError,
    CyclicSource,
    LearnerConfig,
    TrainingLoop,
)
from blocklearn.models import DenseNetwork
from blocklearn.utils.env import load_cfg_from_env

logger = logging.getLogger(__name__)


def build_config(args) -> LearnerConfig:
    cfg = edict()
    for key in ("batch_size", "momentum", "accuracy", "error_memory"):
        value = getattr(args, key, None)
        if value is not None:
            cfg[key] = value
    cfg.progress = bool(getattr(args, "progress", False))
    cfg = load_cfg_from_env(cfg, os.environ)
    return LearnerConfig.from_cfg(cfg)


def load_dataset(path):
    with np.load(path) as data:
        if "inputs" not in data or "targets" not in data:
            raise ConfigurationError(
                _("'{path}' must contain 'inputs' and 'targets' arrays").format(
                    path=path
                )
            )
        inputs = np.asarray(data["inputs"], dtype=float)
        targets = np.asarray(data["targets"], dtype=float)
    return inputs.reshape(len(inputs), -1), targets.reshape(len(targets), -1)


def handle(args):
    inputs, targets = load_dataset(args.data)
    config = build_config(args)
    logger.debug(_("Training configuration: {config}").format(config=config))

    model = DenseNetwork(inputs.shape[1], args.hidden, targets.shape[1], seed=args.seed)

    def on_block_done(blocks_done, mean_error):
        logger.debug(
            _("Block {blocks} mean error {error:.6f}").format(
                blocks=blocks_done, error=mean_error
            )
        )

    loop = TrainingLoop(model, config=config, on_block_done=on_block_done)

    if args.target_error is not None:
        mean_error = loop.learn_to_error(
            args.target_error, source=CyclicSource(inputs, targets)
        )
    elif args.blocks is not None:
        mean_error = loop.learn_blocks(args.blocks, source=CyclicSource(inputs, targets))
    else:
        mean_error = loop.mean_error
        for _pass in range(args.passes):
            mean_error = loop.learn_dataset(inputs, targets)

    logger.info(
        _("Finished after {blocks} blocks ({examples} examples), mean error {error:.6f}").format(  # noqa:E501
            blocks=loop.blocks_done, examples=loop.examples_done, error=mean_error
        )
    )
    print(f"{mean_error:.6f}")
    return loop
