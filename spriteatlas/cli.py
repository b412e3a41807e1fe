"""
SpriteAtlas CLI - Command-line interface for packing sprite atlases
"""

import click
import json
import logging
import sys
from pathlib import Path
from spriteatlas import PixelFormat, PixelImage, TextureAtlasBuilder, TextureAtlasLayout, TextureAtlasSettings
from spriteatlas.errors import NotEnoughSpaceError, WrongFormatError

FORMAT_CHOICES = [f.value for f in PixelFormat]


def _collect_images(inputs):
    """Expand input files and directories (their *.png files, by name) into paths"""
    paths = []
    for item in inputs:
        path = Path(item)
        if path.is_dir():
            paths.extend(sorted(path.glob('*.png')))
        elif path.exists():
            paths.append(path)
        else:
            raise FileNotFoundError(f"Input not found: {item}")
    return paths


def _layout_to_json(layout, sources=None):
    data = {
        'size': list(layout.size),
        'textures': [[*rect.min, *rect.max] for rect in layout.textures],
    }
    if sources is not None:
        data['sources'] = dict(sources.texture_ids)
    return data


@click.group()
@click.version_option(package_name='spriteatlas')
def cli():
    """
    SpriteAtlas - Pack sprites into a single texture atlas.

    Examples:
        spriteatlas pack sprites/ -o atlas.png --layout atlas.json
        spriteatlas grid --tile-size 16 16 --columns 8 --rows 4
    """
    pass


@cli.command()
@click.argument('inputs', nargs=-1, required=True)
@click.option('-o', '--output', required=True, help='Output atlas image path (.png)')
@click.option('--layout', 'layout_path', default=None, help='Write the atlas layout to this JSON file')
@click.option('--min-size', nargs=2, type=int, default=(256, 256), show_default=True, help='Minimum atlas size W H')
@click.option('--max-size', nargs=2, type=int, default=(2048, 2048), show_default=True, help='Maximum atlas size W H')
@click.option('--margin', nargs=2, type=int, default=(0, 0), show_default=True, help='Margin around the atlas X Y')
@click.option('--padding', nargs=2, type=int, default=(0, 0), show_default=True, help='Padding between sprites X Y')
@click.option('--format', 'convert_format', type=click.Choice(FORMAT_CHOICES), default=None,
              help='Convert all sprites to this pixel format')
@click.option('--verbose', '-v', is_flag=True, help='Show packing details')
def pack(inputs, output, layout_path, min_size, max_size, margin, padding, convert_format, verbose):
    """
    Pack image files into a texture atlas.

    INPUTS are image files or directories of .png files. Each sprite is
    registered under its file name without extension.

    Examples:
        spriteatlas pack sprites/ -o atlas.png
        spriteatlas pack hero.png coin.png -o atlas.png --padding 2 2 --margin 1 1
    """
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING,
                        format="%(levelname)s: %(message)s")
    try:
        paths = _collect_images(inputs)
        if not paths:
            raise ValueError("No images found in inputs")

        settings = TextureAtlasSettings(
            min_size=min_size,
            max_size=max_size,
            margin=margin,
            padding=padding,
            convert_format=convert_format,
        )
        seen = {}
        for path in paths:
            if path.stem in seen:
                raise ValueError(f"Duplicate sprite name '{path.stem}': {seen[path.stem]} and {path}")
            seen[path.stem] = path

        builder = TextureAtlasBuilder(settings)
        for path in paths:
            if verbose:
                click.echo(f"Adding: {path}")
            builder.add_texture(path.stem, PixelImage.open(path))

        layout, sources, atlas = builder.build()

        image = atlas.to_pil()
        if image.mode == 'F':
            # Float data cannot be written as PNG
            image = image.convert('L')
        image.save(output)

        if layout_path:
            with open(layout_path, 'w') as f:
                json.dump(_layout_to_json(layout, sources), f, indent=2)

        if verbose:
            click.echo(f"\nAtlas: {layout.size[0]}x{layout.size[1]} ({atlas.format.value})")
            click.echo(f"  Sprites: {len(layout)}")

        click.secho(f"✓ Success! Atlas saved to {output}", fg='green')

    except FileNotFoundError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)
    except NotEnoughSpaceError as e:
        click.secho(f"Not enough space: {e}. Try a larger --max-size.", fg='red', err=True)
        sys.exit(1)
    except WrongFormatError as e:
        click.secho(f"Format error: {e}. Try --format.", fg='red', err=True)
        sys.exit(1)
    except ValueError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)
    except Exception as e:
        click.secho(f"Unexpected error: {e}", fg='red', err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


@cli.command()
@click.option('--tile-size', nargs=2, type=int, required=True, help='Cell size W H')
@click.option('--columns', type=int, required=True, help='Cells per row')
@click.option('--rows', type=int, required=True, help='Number of rows')
@click.option('--padding', nargs=2, type=int, default=(0, 0), show_default=True, help='Gap between cells X Y')
@click.option('--offset', nargs=2, type=int, default=(0, 0), show_default=True, help='Position of the first cell X Y')
@click.option('-o', '--output', default=None, help='Write the layout JSON here instead of stdout')
def grid(tile_size, columns, rows, padding, offset, output):
    """
    Describe a uniform sprite sheet grid as an atlas layout.

    Examples:
        spriteatlas grid --tile-size 16 16 --columns 8 --rows 4
        spriteatlas grid --tile-size 32 32 --columns 4 --rows 1 --padding 2 2 -o sheet.json
    """
    try:
        layout = TextureAtlasLayout.from_grid(tile_size, columns, rows, padding=padding, offset=offset)
        text = json.dumps(_layout_to_json(layout), indent=2)
        if output:
            with open(output, 'w') as f:
                f.write(text)
            click.secho(f"✓ Success! Layout saved to {output}", fg='green')
        else:
            click.echo(text)
    except ValueError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
