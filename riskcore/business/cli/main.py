"""
CLI Main Entry Point - 命令行主入口

使用 Click 库构建命令行工具。
"""

import click

from riskcore import __version__
from riskcore.business.cli.commands.kelly import kelly
from riskcore.business.cli.commands.margin import margin
from riskcore.business.cli.commands.snapshot import snapshot


@click.group()
@click.version_option(version=__version__, prog_name="riskcore")
def cli() -> None:
    """风险引擎 - 命令行工具

    提供 Kelly 仓位、保证金/强平价格计算与风险快照。
    """
    pass


# 注册子命令
cli.add_command(snapshot)
cli.add_command(kelly)
cli.add_command(margin)


if __name__ == "__main__":
    cli()
