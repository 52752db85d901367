"""
CodeAtlas Test Configuration.

Pytest fixtures writing small TypeScript projects into tmp_path.
Requires Python 3.11+.
"""

from pathlib import Path
from typing import Callable

import pytest

from catalog.builder import CatalogBuilder
from catalog.function_tracker import FunctionReferenceTracker
from catalog.heuristic_scanner import HeuristicReferenceScanner
from catalog.kinds import default_kinds
from catalog.member_tracker import MemberReferenceTracker
from catalog.models import Catalog
from source_model.typescript_model import TypeScriptSourceModel
from utils.config import Settings

ProjectFactory = Callable[[dict[str, str]], Path]


def write_project(root: Path, files: dict[str, str]) -> Path:
    """Write {relative path: content} under root and return root."""
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    return root


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """Factory writing a project into a fresh directory."""
    counter = {"n": 0}

    def factory(files: dict[str, str]) -> Path:
        counter["n"] += 1
        return write_project(tmp_path / f"project{counter['n']}", files)

    return factory


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of the environment cache."""
    return Settings()


@pytest.fixture
def make_model(make_project: ProjectFactory, settings: Settings):
    """Factory returning a TypeScriptSourceModel over a written project."""

    def factory(files: dict[str, str], model_settings: Settings | None = None) -> TypeScriptSourceModel:
        root = make_project(files)
        paths = sorted(root / relative for relative in files)
        return TypeScriptSourceModel(root, paths, model_settings or settings)

    return factory


def track_references(
    model: TypeScriptSourceModel, bucket_by_owner: bool = False
) -> Catalog:
    """Run every phase up to (not including) cross-linking."""
    kinds = default_kinds()
    catalog = CatalogBuilder(model, kinds).build(model.files)
    HeuristicReferenceScanner(model, kinds).scan(catalog.files, catalog)
    MemberReferenceTracker(model, bucket_by_owner).track(catalog.files, catalog)
    FunctionReferenceTracker(model).track(catalog.files, catalog)
    return catalog


@pytest.fixture
def tracked_catalog(make_model):
    """Factory: write a project, build its model and run the reference phases."""

    def factory(files: dict[str, str], bucket_by_owner: bool = False) -> Catalog:
        return track_references(make_model(files), bucket_by_owner)

    return factory


@pytest.fixture
def sample_typescript_code() -> str:
    """Sample TypeScript module exercising most declaration forms."""
    return '''import { Injectable } from "@angular/core";
import DefaultThing, { Helper as Aid, Other } from "./helpers";
import * as path from "path";

/** Persists users. */
export abstract class Repository<T extends object> {
  static instances = 0;
  protected items: T[] = [];

  constructor(private readonly name: string, public limit?: number) {}

  abstract find(id: string): T | undefined;

  save(item: T): void {
    this.items.push(item);
  }

  static create(): string {
    return "repo";
  }
}

export class UserRepository extends Repository<User> implements Store, Named {
  find(id: string): User | undefined {
    return undefined;
  }
}

export interface Store {
  readonly size: number;
  find(id: string): unknown;
  find(id: number): unknown;
}

interface Named extends Store {
  label?: string;
}

export enum Color {
  Red,
  Green = "green",
}

export type UserId = string | number;

export function parse(value: string): number;
export function parse(value: number): number;
export function parse(value: any): number {
  return Number(value);
}

export const format = (value: number, prefix = "#"): string => prefix + value;

function helper(...rest: string[]) {}
'''
