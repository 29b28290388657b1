# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT


from abc import ABC, abstractmethod


class ConvectiveModel(ABC):
    """Interior and boundary fluxes plus the convective step bound.

    States and normals are arrays whose last axis holds the two
    components, so every method works on a single face or on a batch.
    """

    @abstractmethod
    def flux(self, xi, xj, n):
        pass

    @abstractmethod
    def boundary_flux(self, xi, tag, n):
        pass

    @abstractmethod
    def dt_max(self, xi, xj, h):
        pass


class SourceModel(ABC):
    @abstractmethod
    def has_source(self):
        pass

    @abstractmethod
    def source(self, i, p):
        pass

    @abstractmethod
    def source_dt_max(self, i, p):
        pass


class LinearizedModel(ABC):
    """Jacobians needed by implicit discretizations."""

    @abstractmethod
    def jac_flux(self, xi, xj, n):
        pass

    @abstractmethod
    def jac_boundary_flux(self, xi, tag, n):
        pass

    @abstractmethod
    def jac_source(self, i, p):
        pass


def require_linearization(model, operation):
    """Raise NotImplementedError unless ``model`` provides Jacobians."""
    if not isinstance(model, LinearizedModel):
        raise NotImplementedError(
            f"{operation} needs a linearized model, but {type(model).__name__} "
            "only supports explicit discretization"
        )
    return model
