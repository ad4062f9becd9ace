#!/usr/bin/env python3
"""
Raspberry Pi Energy Bench - interactive controller
"""

from energy_sim.settings import load_settings
from energy_sim.controllers import EnergyController
from energy_sim.views import LatestSampleView


def show_help():
    """Display help menu"""
    print("""
==================================================
COMMANDS
==================================================
  s - Status          h - Help            q - Quit

  SIMULATION:
  1 - Start / Pause   3 - Export CSV
  2 - Reset           w - Watch samples on/off

  PARAMETERS:
  v - Set voltage     r - Set resistance

  GPIO / DATA:
  p - Toggle pin      g - GPIO grid
  c - Recent samples
==================================================""")


def main():
    """Main entry point"""
    print("\n" + "=" * 50)
    print("  RASPBERRY PI ENERGY BENCH")
    print("=" * 50 + "\n")

    settings = load_settings()
    controller = EnergyController(settings)
    watcher = LatestSampleView(every=10)
    watching = False

    print("[SYSTEM] Ready. Press '1' to start.\n")
    show_help()

    running = True
    while running:
        try:
            cmd = input("\n> ").strip().lower()

            if not cmd:
                continue
            elif cmd == 'h':
                show_help()
            elif cmd == 'q':
                running = False
                print("\nExiting...")
            elif cmd == 'w':
                watching = not watching
                if watching:
                    controller.attach_view(watcher)
                else:
                    controller.detach_view(watcher)
                print(f"[SYSTEM] Watch {'ON' if watching else 'OFF'}")
            else:
                result = controller.handle_command(cmd)
                if result is None:
                    print("Unknown command. Press 'h' for help.")

        except KeyboardInterrupt:
            running = False
            print("\n\nExiting...")
        except Exception as e:
            print(f"[ERROR] {e}")

    controller.cleanup()
    print("[SYSTEM] Done.")


if __name__ == "__main__":
    main()
