from median_filter.window import filter_rows


def apply_median_filter(img, kernel_size):
    return filter_rows(img, 0, img.height, kernel_size)
