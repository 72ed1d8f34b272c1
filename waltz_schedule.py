#!/usr/bin/env python3
"""Print the onset times of a short waltz using beattime expressions.

Time: 3/4 | Tempo: 100 BPM | PPQ: 480

Each bar gets an "oom" on the downbeat and two "pah" chords on beats 2
and 3. A swung pickup and a quantized fill show the operators.
"""

from beattime import Time, Transport, parse_time


def main() -> None:
    transport = Transport(bpm=100.0, time_signature=3, ppq=480)

    # ── Bar grid ───────────────────────────────────────────────────
    print("Bar grid (seconds from start):")
    for bar in range(4):
        oom = parse_time(f"{bar}:0:0").eval(transport)
        pah1 = parse_time(f"{bar}:1:0").eval(transport)
        pah2 = parse_time(f"{bar}:2:0").eval(transport)
        print(f"  bar {bar + 1}: oom {oom:6.3f}  pah {pah1:6.3f}  pah {pah2:6.3f}")

    # ── Pickup and fill ────────────────────────────────────────────
    pickup = parse_time("-(4n+8t)").eval(transport)
    print(f"\nPickup starts {pickup:.3f}s before bar 1")

    fill = Time("3m").sub("8n").eval(transport)
    print(f"Fill at {fill:.3f}s")

    eighths = Time("1m").quantize("8n").eval(transport)
    print(f"One bar holds {eighths:g} eighth notes")

    # ── Relative to a running clock ────────────────────────────────
    print(f"Next downbeat if now is 12.0s: {Time('1m').from_now().eval(transport, now=12.0):.3f}s")


if __name__ == "__main__":
    main()
