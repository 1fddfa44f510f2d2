"""Geometry of the barrel electromagnetic calorimeter towers."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class TowerLocation:
    """Hardware position of a tower: module index and position inside the module."""

    module: int
    eta: int
    phi: int


class BemcHelper:
    """Maps tower ids (1..4800) to their eta/phi position.

    The barrel has 120 modules (60 in phi x 2 in eta), each with 40 towers
    (2 in phi x 20 in eta).
    """

    def __init__(self) -> None:
        self.modules = 120
        self.towers_per_module_phi = 2
        self.towers_per_module_eta = 20
        self.eta_min = 0.0035
        self.eta_max = 0.984
        self.barrel_radius = 225.405
        self.half_width_module = 11.174

        self.towers_per_module = self.towers_per_module_eta * self.towers_per_module_phi
        self.towers = self.towers_per_module * self.modules

        bounds = [0.05 * i for i in range(self.towers_per_module_eta + 1)]
        bounds[0] = self.eta_min
        bounds[-1] = self.eta_max
        self.eta_bounds = tuple(bounds)
        self.eta_center = tuple((lo + hi) / 2.0 for lo, hi in zip(bounds, bounds[1:]))

        pi = math.pi
        self.phi_offset = (72.0 / 180.0 * pi, 108.0 / 180.0 * pi)
        step = pi * 2.0 / (self.modules / 2.0)
        self.phi_module_step_width = (-step, step)
        self.phi_center_y = (-self.half_width_module / 2.0, self.half_width_module / 2.0)
        self.phi_center = tuple(math.atan2(y, self.barrel_radius) for y in self.phi_center_y)

    def hardware_location(self, tower_id: int) -> TowerLocation:
        """Module, eta position and phi position of a tower."""
        if tower_id <= 0 or tower_id > self.towers:
            raise IndexError(
                f"tower index out of bounds: {tower_id} requested, "
                f"but tower index range is [1, {self.towers}]"
            )
        index = tower_id - 1
        module, local = divmod(index, self.towers_per_module)
        phi, eta = divmod(local, self.towers_per_module_eta)
        return TowerLocation(module=module, eta=eta, phi=phi)

    def tower_eta(self, tower_id: int) -> float:
        """Pseudorapidity of the tower centre, not corrected for the vertex."""
        location = self.hardware_location(tower_id)
        eta = self.eta_center[location.eta]
        if location.module >= self.modules / 2.0:
            eta = -eta
        return eta

    def tower_phi(self, tower_id: int) -> float:
        """Azimuth of the tower centre in [-pi, pi)."""
        location = self.hardware_location(tower_id)
        half = self.modules // 2
        phi = self.phi_center[location.phi]
        if location.module < half:
            phi = -phi
            side = 0
            module_on_side = location.module
        else:
            side = 1
            module_on_side = location.module - half
        phi += self.phi_offset[side]
        phi += self.phi_module_step_width[side] * module_on_side

        while phi < -math.pi:
            phi += 2.0 * math.pi
        while phi >= math.pi:
            phi -= 2.0 * math.pi
        return phi

    def vertex_corrected_eta(self, tower_id: int, vz: float) -> float:
        """Pseudorapidity of the tower seen from a vertex at z = vz."""
        tower_eta = self.tower_eta(tower_id)
        tower_theta = 2.0 * math.atan(math.exp(-tower_eta))
        z = 0.0
        if tower_eta != 0.0:
            z = self.barrel_radius / math.tan(tower_theta)
        theta_corr = math.atan2(self.barrel_radius, z - vz)
        return -math.log(math.tan(theta_corr / 2.0))