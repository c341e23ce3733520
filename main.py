"""
Run a CHIP-8 program, either in a pygame window or headless.

    python main.py rom=games/pong.ch8
    python main.py rom=games/pong.ch8 legacy_mode=true render.color_scheme=amber
    python main.py rom=games/pong.ch8 headless_frames=600 video=pong.mp4
"""

import jax
import hydra
from omegaconf import DictConfig, OmegaConf

from chix8 import Machine, MachineFault, RecordingPeripherals, create_video
from chix8.logging import MachineLogger


def run_headless(machine: Machine, recorder: RecordingPeripherals, cfg: DictConfig):
    machine.run(max_frames=cfg.headless_frames, paced=False, progress=True)
    if cfg.video:
        create_video(
            recorder.frames,
            cfg.video,
            fps=cfg.fps,
            scale=cfg.render.scale,
            color_scheme=cfg.render.color_scheme,
        )


def run_interactive(machine: Machine, cfg: DictConfig):
    # Imported lazily so headless runs work without a display
    from chix8.frontend import PygamePeripherals

    peripherals = PygamePeripherals(
        scale=cfg.render.scale,
        color_scheme=cfg.render.color_scheme,
        on_quit=machine.stop,
        title=f"chix8 - {cfg.rom}",
    )
    machine.peripherals = peripherals
    try:
        machine.run()
    finally:
        peripherals.close()


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    logger = MachineLogger(log_level=cfg.log_level)
    logger.debug(OmegaConf.to_yaml(cfg))

    recorder = RecordingPeripherals(keep_frames=bool(cfg.video))
    machine = Machine(
        peripherals=recorder,
        legacy_mode=cfg.legacy_mode,
        instruction_frequency=cfg.instruction_frequency,
        fps=cfg.fps,
        rng=jax.random.PRNGKey(cfg.seed),
        logger=logger,
        log_interval=cfg.log_interval,
    )
    machine.load_rom(cfg.rom)

    try:
        if cfg.headless_frames > 0:
            run_headless(machine, recorder, cfg)
        else:
            run_interactive(machine, cfg)
    except MachineFault:
        # Already logged with a register dump by the machine
        raise SystemExit(1)


if __name__ == "__main__":
    main()
