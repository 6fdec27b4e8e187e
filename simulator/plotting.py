import numpy as np
import matplotlib.pyplot as plt


def plot_history(history, units="m", show=False):
    """
    Position / velocity components and magnitudes of a TrajectoryHistory.

    Returns the list of figures so callers (and tests) can save or close them.
    """
    table = history.as_array()
    if table.size == 0:
        raise ValueError("Nothing to plot, history is empty.")

    t_sec = table[:, 0]
    r_eci = table[:, 1:4]
    v_eci = table[:, 4:7]
    r_norm = np.linalg.norm(r_eci, axis=1)
    v_norm = np.linalg.norm(v_eci, axis=1)

    figs = []

    fig = plt.figure()
    plt.plot(t_sec, r_eci[:, 0], label="r_x (ECI)")
    plt.plot(t_sec, r_eci[:, 1], label="r_y (ECI)")
    plt.plot(t_sec, r_eci[:, 2], label="r_z (ECI)")
    plt.xlabel("Elapsed time [s]")
    plt.ylabel(f"Position [{units}]")
    plt.title("ECI Position Components vs Time")
    plt.grid(True)
    plt.legend()
    figs.append(fig)

    fig = plt.figure()
    plt.plot(t_sec, v_eci[:, 0], label="v_x (ECI)")
    plt.plot(t_sec, v_eci[:, 1], label="v_y (ECI)")
    plt.plot(t_sec, v_eci[:, 2], label="v_z (ECI)")
    plt.xlabel("Elapsed time [s]")
    plt.ylabel(f"Velocity [{units}/s]")
    plt.title("ECI Velocity Components vs Time")
    plt.grid(True)
    plt.legend()
    figs.append(fig)

    fig, ax_r = plt.subplots()
    ax_r.plot(t_sec, r_norm, color="tab:blue", label="|r|")
    ax_r.set_xlabel("Elapsed time [s]")
    ax_r.set_ylabel(f"|r| [{units}]")
    ax_v = ax_r.twinx()
    ax_v.plot(t_sec, v_norm, color="tab:orange", label="|v|")
    ax_v.set_ylabel(f"|v| [{units}/s]")
    ax_r.set_title("ECI Magnitudes |r| and |v| vs Time")
    ax_r.grid(True)
    figs.append(fig)

    fig = plt.figure()
    plt.plot(r_eci[:, 0], r_eci[:, 1], marker=".")
    plt.xlabel(f"x [{units}]")
    plt.ylabel(f"y [{units}]")
    plt.title("Orbit Track (ECI x-y plane)")
    plt.axis("equal")
    plt.grid(True)
    figs.append(fig)

    if show:
        plt.show()

    return figs
