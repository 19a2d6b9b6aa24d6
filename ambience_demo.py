"""
Ambience Demo - Loop ambient channels and fade them out with the sleep timer.

Run: python ambience_demo.py [sounds_root]

sounds_root must contain sounds/wind.mp3, sounds/fire.mp3, sounds/rain.mp3
and sounds/wave.mp3 (any format libsndfile can read).
"""

import logging
import sys
import time

from ambience import AmbienceManager, AmbienceManagerConfig, PlaybackFailure, SignalDebugger
from ambience.audio import SOUNDDEVICE_AVAILABLE
from ambience.core.signal import SIGNAL_TIMER_TICK, SIGNAL_MUTE_CHANGED

DEMO_TIMER_SECONDS = 10


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')

    print("=" * 60)
    print("AMBIENCE DEMO")
    print("=" * 60)

    if not SOUNDDEVICE_AVAILABLE:
        print("\nWARNING: sounddevice / PortAudio not available")
        print("Install with: pip install sounddevice (and the PortAudio library)")
        return

    config = AmbienceManagerConfig(
        sounds_root=sys.argv[1] if len(sys.argv) > 1 else "",
        master_volume=80,
    )
    manager = AmbienceManager(config)

    debugger = SignalDebugger(manager.bridge)
    debugger.watch(SIGNAL_MUTE_CHANGED)
    logging.getLogger("ambience.core.signal").setLevel(logging.DEBUG)

    def on_tick(remaining):
        print(f"  Timer: {manager.timer.format_remaining()}")

    manager.bridge.connect(SIGNAL_TIMER_TICK, on_tick)
    manager.timer.register_on_complete(lambda: print("\nTimer complete, muting."))

    print("\nChannels:")
    for name in manager.mixer.channel_names:
        print(f"  {name}: {config.channels[name]}")

    with manager:
        try:
            manager.mixer.set_channel_volume("Rain", 60)
            manager.mixer.set_channel_volume("Wind", 30)
        except PlaybackFailure as e:
            print(f"\nCould not start playback: {e}")
            return

        print(f"\nPlaying Rain + Wind. Sleep timer: {DEMO_TIMER_SECONDS}s. Press Ctrl+C to stop")
        manager.timer.start(DEMO_TIMER_SECONDS)

        try:
            while not manager.timer.is_expired:
                time.sleep(0.1)
            time.sleep(0.5)
        except KeyboardInterrupt:
            print("\nStopping...")

    debugger.detach()
    print("Done!")


if __name__ == "__main__":
    main()
