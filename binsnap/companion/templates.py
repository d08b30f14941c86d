"""Static files of the fuzzer project written next to each snapshot."""

from __future__ import annotations

CARGO_TOML = """[package]
name = "snapchange_binonly"
version = "0.1.0"
edition = "2021"

[dependencies]
snapchange = { git = "https://github.com/awslabs/snapchange" }
log = "0.4"

[build-dependencies]
regex = "1"

[profile.release]
panic = "abort"
lto = true
codegen-units = 1
opt-level = 3
debug = true
"""

BUILD_RS = """use std::fs;
use std::path::Path;

/// Generate `src/constants.rs` values from the snapshot directory.
fn main() {
    println!("cargo:rerun-if-changed=snapshot/");

    let snapshot = Path::new("snapshot");
    let Ok(vmlinux) = fs::read_to_string(snapshot.join("fuzzvm.physmem.cr3")) else {
        return;
    };

    let cr3 = vmlinux.trim();
    let rip = fs::read_to_string(snapshot.join("fuzzvm.qemuregs"))
        .ok()
        .and_then(|regs| {
            regs.lines()
                .find(|line| line.starts_with("RIP="))
                .map(|line| line[4..20].to_string())
        })
        .unwrap_or_else(|| "0".to_string());

    let out = format!(
        "pub const CR3: u64 = 0x{cr3};\\npub const RIP: u64 = 0x{rip};\\n"
    );
    fs::write("src/constants.rs", out).expect("Failed to write src/constants.rs");
}
"""

RESET_SH = """#!/usr/bin/env bash
# Remove fuzzing state so the next run starts from the snapshot alone.
set -e

rm -rf snapshot/crashes snapshot/current_corpus snapshot/coverage.* snapshot/data
cargo build -r
"""

MAIN_RS = """//! Fuzzer for a snapshot taken of a binary without source

#![feature(core_intrinsics)]

mod constants;
mod fuzzer;

fn main() -> anyhow::Result<()> {
    snapchange::snapchange_main::<fuzzer::Example>()
}
"""

FUZZER_RS = """//! Fuzz the snapshot taken at the requested function

use snapchange::prelude::*;

use crate::constants;

#[derive(Default)]
pub struct Example;

impl Fuzzer for Example {
    type Input = Vec<u8>;
    const START_ADDRESS: u64 = constants::RIP;
    const MAX_INPUT_LENGTH: usize = 0x1000;
    const MAX_MUTATIONS: u64 = 16;

    fn set_input(&mut self, input: &Self::Input, fuzzvm: &mut FuzzVm<Self>) -> Result<()> {
        // Overwrite the bytes of the truncated input file read by the target
        let _ = (input, fuzzvm);
        Ok(())
    }

    fn reset_breakpoints(&self) -> Option<&[AddressLookup]> {
        Some(&[AddressLookup::SymbolOffset("libc.so.6!exit", 0)])
    }
}
"""

LIBFUZZER_RS = """//! Fuzz the snapshot taken at `LLVMFuzzerTestOneInput`

use snapchange::prelude::*;

use crate::constants;

#[derive(Default)]
pub struct Example;

impl Fuzzer for Example {
    type Input = Vec<u8>;
    const START_ADDRESS: u64 = constants::RIP;
    const MAX_INPUT_LENGTH: usize = 0x1000;
    const MAX_MUTATIONS: u64 = 16;

    fn set_input(&mut self, input: &Self::Input, fuzzvm: &mut FuzzVm<Self>) -> Result<()> {
        // LLVMFuzzerTestOneInput(const uint8_t *data, size_t size)
        fuzzvm.write_bytes_dirty(VirtAddr(fuzzvm.rdi()), fuzzvm.cr3(), input)?;
        fuzzvm.set_rsi(input.len() as u64);
        Ok(())
    }

    fn reset_breakpoints(&self) -> Option<&[AddressLookup]> {
        Some(&[AddressLookup::SymbolOffset("LLVMFuzzerTestOneInput", 0x0)])
    }
}
"""

CONSTANTS_RS = """// Overwritten by build.rs once the snapshot exists
pub const CR3: u64 = 0;
pub const RIP: u64 = 0;
"""
